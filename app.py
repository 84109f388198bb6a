from flask import Flask, request, session, jsonify
import uuid

# --- Services & Utils ---
from utils.config import Config
from utils.medicine_data import MedicineCatalog, DataLoadError
from utils.reminder import ReminderStore, DEFAULT_REMINDER_TIME
from utils.search import SearchSession, SearchSessionPool, search_medicines, suggest_medicines, summarize
from utils.utils import setup_logger
from services.notifier import NotificationCenter
from services.scheduler import ReminderScheduler
from services.validator import Validator

logger = setup_logger(__name__)


def create_app(catalog=None, store=None, notifier=None, clock=None,
               start_scheduler=True, timer_factory=None, test_config=None):
    Config.validate()

    # --- App Config ---
    app = Flask(__name__)
    app.secret_key = Config.FLASK_SECRET_KEY
    if test_config:
        app.config.update(test_config)

    # --- Initialize Core Services ---
    catalog = catalog or MedicineCatalog()
    store = store or ReminderStore()
    store.load()
    notifier = notifier or NotificationCenter(timer_factory=timer_factory)
    scheduler = ReminderScheduler(store, notifier, clock=clock)
    if start_scheduler:
        scheduler.start()

    search_sessions = SearchSessionPool(
        lambda: SearchSession(catalog.load(), timer_factory=timer_factory),
        limit=app.config.get('SEARCH_SESSION_LIMIT'),
        idle_seconds=app.config.get('SEARCH_SESSION_IDLE_SECONDS'),
        clock=app.config.get('SEARCH_SESSION_CLOCK'),
    )

    app.extensions['medifind'] = {
        'catalog': catalog,
        'store': store,
        'notifier': notifier,
        'scheduler': scheduler,
        'search_sessions': search_sessions,
    }

    # --- Helper Logic ---
    def view_id():
        if 'view_id' not in session:
            session['view_id'] = str(uuid.uuid4())
        return session['view_id']

    def search_session():
        return search_sessions.get(view_id())

    def close_search_session():
        return search_sessions.close(session.get('view_id'))

    def json_object():
        data = request.get_json(silent=True)
        if data is None:
            return {}
        return data if isinstance(data, dict) else None

    def query_arg():
        query = request.args.get('q')
        return query, Validator.validate_query(query)

    # --- Error Handling ---
    @app.errorhandler(DataLoadError)
    def data_load_error(error):
        logger.error(f"Medicine data unavailable: {error.detail}")
        return jsonify({'error': error.user_message}), 503

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal Server Error'}), 500

    @app.errorhandler(Exception)
    def handle_exception(e):
        logger.error(f"Unhandled Exception: {e}", exc_info=True)
        return jsonify({'error': 'Internal Server Error'}), 500

    # --- Routes ---
    @app.route('/')
    def index():
        return jsonify({
            'app': 'MediFind',
            'features': {
                'find_medicine': '/api/medicines/search?q=',
                'my_medications': '/api/reminders',
            },
        })

    @app.route('/api/medicines/search')
    def medicine_search():
        query, err = query_arg()
        if err:
            return jsonify({'errors': [err]}), 400
        results, initiated = search_medicines(query, catalog.load())
        return jsonify({
            'query': query,
            'search_initiated': initiated,
            'results': [summarize(m) for m in results],
        })

    @app.route('/api/medicines/suggest')
    def medicine_suggest():
        query, err = query_arg()
        if err:
            return jsonify({'errors': [err]}), 400
        suggestions = suggest_medicines(query, catalog.load())
        return jsonify({'suggestions': [{'id': m.id, 'name': m.name} for m in suggestions]})

    @app.route('/api/medicines/<int:medicine_id>')
    def medicine_detail(medicine_id):
        medicine = catalog.get(medicine_id)
        if medicine is None:
            return jsonify({'error': 'No medicine selected.'}), 404
        return jsonify(medicine.to_dict())

    @app.route('/api/search/input', methods=['POST'])
    def search_input():
        data = json_object()
        if data is None:
            return jsonify({'errors': ["Request body must be a JSON object."]}), 400
        term = data.get('term', '')
        if not isinstance(term, str):
            return jsonify({'errors': ["'term' must be a string."]}), 400
        live = search_session()
        live.update(term)
        return jsonify(live.summary()), 202

    @app.route('/api/search/results')
    def search_results():
        return jsonify(search_session().summary())

    @app.route('/api/search', methods=['DELETE'])
    def search_close():
        closed = close_search_session()
        return jsonify({'success': closed})

    @app.route('/api/reminders', methods=['GET', 'POST'])
    def reminders():
        if request.method == 'POST':
            data = json_object()
            if data is None:
                return jsonify({'errors': ["Request body must be a JSON object."]}), 400
            form_data = {
                'medicine_id': data.get('medicine_id'),
                'time': data.get('time') or DEFAULT_REMINDER_TIME,
            }
            validation_errors = Validator.validate_reminder_input(form_data)
            if validation_errors:
                return jsonify({'errors': validation_errors}), 400

            medicine = catalog.get(int(form_data['medicine_id']))
            if medicine is None:
                return jsonify({'errors': ["Please select a medicine from the suggestions."]}), 400

            reminder = store.add_for_medicine(medicine, form_data['time'])
            return jsonify(reminder.to_dict()), 201

        return jsonify({'reminders': [r.to_dict() for r in store.list()]})

    @app.route('/api/reminders/<int:reminder_id>', methods=['DELETE'])
    def delete_reminder(reminder_id):
        if not store.remove(reminder_id):
            return jsonify({'success': False, 'error': 'Reminder not found'}), 404
        return jsonify({'success': True, 'message': 'Reminder deleted'})

    @app.route('/api/notification')
    def notification():
        return jsonify(notifier.current())

    @app.route('/api/notification/dismiss', methods=['POST'])
    def notification_dismiss():
        notifier.dismiss()
        return jsonify(notifier.current())

    return app


def shutdown_app(app):
    """Stop the poller and every pending timer owned by the app."""
    services = app.extensions['medifind']
    services['scheduler'].shutdown()
    services['notifier'].close()
    services['search_sessions'].close_all()


if __name__ == '__main__':
    app = create_app()
    try:
        app.run(debug=True, port=5000, use_reloader=False)  # Loader false for scheduler
    finally:
        shutdown_app(app)
