import os
from exmobile import create_app # Import the app factory function from exmobile/__init__.py

# Determine which configuration to use from FLASK_ENV or default to 'development'
config_name = os.getenv('FLASK_ENV') or 'development'
app = create_app(config_name)

if __name__ == '__main__':
    # Get PORT from .env or default to 5000
    port = int(os.environ.get('PORT', 5000))
    app.logger.info(f"Ex Mobile running on {port}")
    app.run(host='0.0.0.0', port=port)
