from tasklist.application import create_app
from tasklist.core.config import get_settings
from tasklist.logging_setup import setup_logging

settings = get_settings()
setup_logging(settings.log_level)

app = create_app(settings)
