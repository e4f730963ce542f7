#!/usr/bin/env python3
"""
Web backend for the CSV chart viewer
"""
import os
import logging
from datetime import datetime

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from core.table_parser import InvalidOverrideError, ParseOverrides, parse_upload
from utils.file_validator import validate_upload

load_dotenv()

logging.basicConfig(level=os.getenv('LOG_LEVEL', 'INFO').upper(), format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)

MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', '10'))

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_MB * 1024 * 1024  # uploads stay in memory
app.config['PREVIEW_ROWS'] = int(os.getenv('PREVIEW_ROWS', '20'))


@app.errorhandler(RequestEntityTooLarge)
def file_too_large(e):
    return jsonify({
        'error': f'This file exceeds the {MAX_UPLOAD_MB} MB limit. Please upload a smaller file.',
        'code': 'FILE_TOO_LARGE',
    }), 413


@app.route('/api/upload', methods=['POST'])
def upload():
    file = request.files.get('file')
    filename = file.filename if file and file.filename else None
    log_name = secure_filename(filename) if filename else None

    try:
        data = file.read() if file else None

        validation = validate_upload(filename, file.mimetype if file else None, data)
        if not validation.valid:
            return jsonify({'error': validation.error, 'code': validation.code}), 400

        # Optional overrides from the form body; missing means auto-detect
        try:
            overrides = ParseOverrides(
                delimiter=request.form.get('delimiter', 'auto'),
                decimal=request.form.get('decimal', 'auto'),
                has_header=request.form.get('hasHeader', 'auto'),
            ).validate()
        except InvalidOverrideError as e:
            return jsonify({'error': str(e), 'code': 'INVALID_OVERRIDE'}), 400

        outcome = parse_upload(data, overrides, file_name=filename,
                               preview_rows=app.config['PREVIEW_ROWS'])
    except Exception:
        logger.exception("Upload error for %s", log_name)
        return jsonify({'error': 'Internal server error', 'code': 'SERVER_ERROR'}), 500

    if not outcome.ok:
        return jsonify(outcome.error.to_dict(original_file_name=filename)), 400

    return jsonify(outcome.table.to_dict())



@app.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'timestamp': datetime.now().isoformat()})


if __name__ == '__main__':
    app.run(debug=os.getenv('FLASK_DEBUG') == '1', host='0.0.0.0', port=int(os.getenv('PORT', '3001')))
