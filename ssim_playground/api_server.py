#!/usr/bin/env python3
"""
SSIM Playground API Server
Upload two images, get back SSIM / colour-distance / exact diffs and statistics.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, render_template
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from .errors import (
    ComparisonCancelledError,
    ComparisonError,
    ComparisonTimeoutError,
    ImageDecodeError,
)
from .models.algorithm import Algorithm
from .pipeline.compare_images import compare_images
from .repositories.image_repository import ImageRepository

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
DEFAULT_THRESHOLD = float(os.getenv("DEFAULT_THRESHOLD", "0.95"))
COMPARE_TIMEOUT_S: Optional[float] = (
    float(os.getenv("COMPARE_TIMEOUT_S")) if os.getenv("COMPARE_TIMEOUT_S") else None
)
ALLOWED_EXTENSIONS = set(os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,gif,bmp,webp,tif,tiff").split(","))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50")) * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

image_repository = ImageRepository()

logger = logging.getLogger(__name__)


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("true", "1", "on", "yes")


def error_response(kind: str, message: str, status: int):
    return jsonify({'error': kind, 'message': message}), status


def read_upload(field: str):
    """Decode the uploaded file in *field* into an Image."""
    file = request.files.get(field)
    if file is None or file.filename == '':
        raise KeyError(field)
    filename = secure_filename(file.filename)
    if not allowed_file(filename):
        raise ImageDecodeError(f"File type not allowed: {filename}")
    return image_repository.decode(file.read(), path=filename)


@app.route('/')
def index():
    """Upload page."""
    return render_template('index.html', default_threshold=DEFAULT_THRESHOLD)


@app.route('/compare', methods=['POST'])
def compare():
    """Compare img1 (reference) with img2 and return diffs plus statistics."""
    try:
        img1 = read_upload('img1')
        img2 = read_upload('img2')
    except KeyError as missing:
        return error_response('MissingImage', f"No image provided for {missing.args[0]}", 400)
    except ImageDecodeError as e:
        logger.warning(f"Upload rejected: {e}")
        return error_response('ImageDecodeError', str(e), 400)

    threshold = request.form.get('threshold', DEFAULT_THRESHOLD)
    ignore_luminance = parse_bool(request.form.get('ignore_luminance'))

    try:
        result = compare_images(
            img1, img2, threshold,
            ignore_luminance=ignore_luminance,
            timeout=COMPARE_TIMEOUT_S,
        )
    except ComparisonTimeoutError as e:
        logger.error(f"Comparison timed out: {e}")
        return error_response(type(e).__name__, str(e), 503)
    except ComparisonCancelledError as e:
        logger.error(f"Comparison cancelled: {e}")
        return error_response(type(e).__name__, str(e), 503)
    except ComparisonError as e:
        logger.info(f"Comparison rejected: {e}")
        return error_response(type(e).__name__, str(e), 422)
    except Exception as e:
        logger.error(f"Comparison error: {e}", exc_info=True)
        return error_response('InternalError', 'Error comparing images', 500)

    return jsonify({
        'ssim_image': image_repository.to_data_url(result[Algorithm.SSIM].diff_image),
        'delta_e_image': image_repository.to_data_url(result[Algorithm.COLOR_DISTANCE].diff_image),
        'exact_image': image_repository.to_data_url(result[Algorithm.EXACT].diff_image),
        'img1': image_repository.to_data_url(result.first),
        'img2': image_repository.to_data_url(result.second),
        'stats': result.stats_dict(),
    })


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'SSIM Playground API is running',
        'default_threshold': DEFAULT_THRESHOLD,
    })


@app.errorhandler(RequestEntityTooLarge)
def too_large(e):
    """Handle file too large error."""
    return error_response('RequestEntityTooLarge',
                          f"File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.", 413)


def main():
    host = os.getenv("API_SERVER_HOST", "0.0.0.0")
    port = int(os.getenv("API_SERVER_PORT", "4567"))
    logger.info(f"Starting SSIM Playground on {host}:{port}")
    logger.info(f"Max upload size: {MAX_CONTENT_LENGTH // (1024 * 1024)}MB, default threshold {DEFAULT_THRESHOLD}")
    app.run(host=host, port=port, debug=parse_bool(os.getenv("FLASK_DEBUG")))


if __name__ == '__main__':
    main()
