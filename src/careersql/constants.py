"""
CareerSQL - Console Constants
Constants for the dataset location, prompts, dialect banners and system configuration.
"""

from pathlib import Path

# Dataset
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_PATH = PACKAGE_DIR / 'data' / 'career_data.json'

# Console identity (shown in PostgreSQL-style listings and connect messages)
DB_USER = 'user'
DB_OWNER = 'user'
DB_SCHEMA = 'public'

# Prompts
SHELL_PROMPT = 'user@localhost:~$ '
SQL_PROMPT = 'sql-> '
DB_PROMPT_SUFFIX = '-> '
DEFAULT_SHELL_HISTORY = ['imgcat profile.png']

# Shell mode "filesystem"
SHELL_FILES = ['secret.png', 'profile.png']
FILE_SIZES = {
    '.': 4096,
    '..': 4096,
    'secret.png': 245760,  # 240K
    'profile.png': 153600,  # 150K
}
LS_TOTAL = 456
LS_DATE = 'Nov 19 11:34'
IMAGE_URL_PREFIX = '/data/images/'

# Meta-commands understood by the console
META_COMMANDS = ['\\l', '\\dt', '\\d', '\\c', '\\q']

# SQL words that may start a multi-line statement
LEADING_KEYWORDS = {'select', 'use', 'show', 'insert', 'update', 'delete',
                    'describe', 'desc', 'create', 'drop'}

# Read-only enforcement
READ_ONLY_ERROR = 'Error: {operation} operation is not allowed in read-only mode'

# HTTP API
API_HOST = '0.0.0.0'
API_PORT = 5000

# Logging
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
LOG_LEVEL = 'WARNING'
