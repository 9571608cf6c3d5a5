import os
from flask import Flask
from logging import Formatter
from indexbridge.util.config import Config

# Instantiate the configuration file
configuration = Config(os.environ.get('INDEXBRIDGE_CONFIG', 'config.cfg'))

# Instantiate the application
application = Flask(__name__)

# Tweak logging
formatter = Formatter(
    '%(asctime)s %(levelname)s: %(message)s '
    '[in %(module)s:%(lineno)d]'
)
for handler in application.logger.handlers:
    handler.setFormatter(formatter)

# Import the views
from . import views
