#!/usr/bin/env python3
import sys
import os
import logging

# Add src to path so careersql package can be found
current_dir = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(current_dir, 'src')
sys.path.insert(0, src_dir)

from careersql.constants import API_HOST, API_PORT, LOG_FORMAT, LOG_LEVEL
from server.main import create_app

if __name__ == "__main__":
    logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)
    app = create_app()
    print(f"Starting CareerSQL API on http://localhost:{API_PORT}")
    app.run(debug=True, host=API_HOST, port=API_PORT)
