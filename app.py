# app.py: HTTP surface for statement uploads, message ingestion and analytics

import logging
import os
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.utils import secure_filename

from explainer.analysis import category_breakdown, investment_breakdown
from explainer.config import Config
from explainer.errors import DocumentDecodeError, UnsupportedFormatError
from explainer.extractor import StatementExtractor, ingest_messages
from explainer.models import Transaction
from explainer.storage import TransactionRepository, db

logger = logging.getLogger(__name__)


def configure_logging(app):
    """Console logging always; file logging when LOG_DIR is set."""
    handlers = [logging.StreamHandler()]
    log_dir = app.config.get('LOG_DIR')
    if log_dir:
        if not os.path.isabs(log_dir):
            log_dir = os.path.join(app.root_path, log_dir)
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, 'explainer.log')))

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    db.init_app(app)
    with app.app_context():
        db.create_all()

    register_routes(app)
    return app


def _display_settings(app):
    """Currency symbol and locale for this request (form or JSON override)."""
    payload = request.get_json(silent=True) if request.is_json else None
    source = payload if isinstance(payload, dict) else request.form
    currency = source.get('currency') or app.config['DEFAULT_CURRENCY']
    locale = source.get('locale') or app.config['DEFAULT_LOCALE']
    return currency, locale


def register_routes(app):

    # --- Health Check Endpoint ---
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service': 'Explain My Money',
        }), 200

    # --- Transactions ---
    @app.route('/api/transactions', methods=['GET'])
    def list_transactions():
        repo = TransactionRepository()
        return jsonify([t.to_dict() for t in repo.get_all_transactions()])

    @app.route('/api/transactions', methods=['POST'])
    def create_transaction():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'error': 'Invalid transaction data'}), 400
        try:
            transaction = Transaction.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Rejected transaction payload: {e}")
            return jsonify({'error': 'Invalid transaction data'}), 400
        try:
            record = TransactionRepository().create_transaction(transaction)
        except SQLAlchemyError:
            return jsonify({'error': 'Failed to save transaction'}), 500
        return jsonify(record.to_dict()), 201

    @app.route('/api/transactions/<transaction_id>', methods=['DELETE'])
    def delete_transaction(transaction_id):
        try:
            tx_id = int(transaction_id)
        except ValueError:
            return jsonify({'error': 'Invalid transaction ID'}), 400
        if not TransactionRepository().delete_transaction(tx_id):
            return jsonify({'error': 'Transaction not found'}), 404
        return jsonify({'success': True}), 200

    # --- Analytics ---
    @app.route('/api/analytics/categories')
    def category_analytics():
        transactions = TransactionRepository().get_all_transactions()
        return jsonify(category_breakdown(transactions))

    @app.route('/api/analytics/investments')
    def investment_analytics():
        investments = TransactionRepository().get_investment_transactions()
        result = investment_breakdown(investments)
        result['transactions'] = [t.to_dict() for t in investments]
        return jsonify(result)

    # --- Ingestion ---
    @app.route('/api/upload-statement', methods=['POST'])
    def upload_statement():
        """Parse an uploaded PDF/CSV/spreadsheet statement and store its transactions."""
        if 'file' not in request.files:
            return jsonify({'error': 'No file uploaded'}), 400
        file = request.files['file']
        if file.filename == '':
            return jsonify({'error': 'No file uploaded'}), 400

        filename = secure_filename(file.filename)
        currency, locale = _display_settings(app)
        try:
            extractor = StatementExtractor(
                file.read(),
                filename=filename,
                mimetype=file.mimetype,
                password=request.form.get('password') or None,
                currency=currency,
                locale=locale,
                source=app.config['STATEMENT_SOURCE'],
                debug=app.debug,
            )
        except UnsupportedFormatError as e:
            logger.warning(f"Rejected upload {filename!r}: {e}")
            return jsonify({'error': str(e)}), 400

        repo = TransactionRepository()
        try:
            result = extractor.ingest(persist=repo.create_transaction)
        except DocumentDecodeError as e:
            logger.error(f"Could not decode upload {filename!r}: {e}")
            return jsonify({'error': 'Failed to read the uploaded file. Please check that it is not corrupt.',
                            'details': e.reason}), 422

        if result.is_empty:
            logger.info(f"No transactions found in {filename!r} ({result.total_parsed} rows parsed)")
        return jsonify(result.to_dict()), 200

    @app.route('/api/messages', methods=['POST'])
    def ingest_message():
        """Ingest one `{address, body, timestampMillis}` message or a `{messages: [...]}` batch."""
        data = request.get_json(silent=True)
        if isinstance(data, dict) and 'messages' in data:
            messages = data['messages']
        else:
            messages = [data]
        if not isinstance(messages, list) or not all(isinstance(m, dict) and m.get('body') for m in messages):
            return jsonify({'error': 'Each message needs a body'}), 400

        currency, locale = _display_settings(app)
        result = ingest_messages(messages, persist=TransactionRepository().create_transaction,
                                 currency=currency, locale=locale)
        return jsonify(result.to_dict()), 201 if result.count else 200

    @app.errorhandler(413)
    def request_entity_too_large(error):
        """Handles file uploads exceeding the size limit."""
        limit = app.config.get('MAX_UPLOAD_MB')
        return jsonify({'error': f'File too large! Maximum file size is {limit}MB.'}), 413


if __name__ == '__main__':
    create_app().run(debug=True)
