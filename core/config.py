# core/config.py
# Configures core app behaviours via the .env file.  These rarely need changing; per-template
# content lives in data/templates.yaml.

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

SCRIPTMINE_HOME     =  Path(os.getenv("SCRIPTMINE_HOME",     "~/ScriptMine")).expanduser()
DB_FILENAME         =       os.getenv("DB_FILENAME",         "script_database.db")
TEMPLATES_PATH      =  Path(os.getenv("TEMPLATES_PATH",      Path(__file__).parent.parent / "data/templates.yaml"))
LOG_LEVEL           =       os.getenv("LOG_LEVEL",           "WARNING").upper()

MAX_CONTENT_LENGTH  =   int(os.getenv("MAX_CONTENT_LENGTH",  50000))
MAX_TEMPLATE_LENGTH =   int(os.getenv("MAX_TEMPLATE_LENGTH",   100))

DB_PATH             = SCRIPTMINE_HOME / DB_FILENAME
