#!/usr/bin/env python3
"""
Simple script to run the web application
"""
from app import app, MAX_UPLOAD_MB
import os

if __name__ == '__main__':
    port = int(os.getenv('PORT', '3001'))
    print("Starting CSV chart backend")
    print(f"API at: http://localhost:{port}/api/upload")
    print(f"Upload limit: {MAX_UPLOAD_MB} MB (set MAX_UPLOAD_MB in .env to change)")
    print("Press Ctrl+C to stop the server\n")

    app.run(debug=os.getenv('FLASK_DEBUG') == '1', host='0.0.0.0', port=port)
