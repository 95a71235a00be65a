"""
Finance Forecast - Flask Web Application

JSON API over the monthly income/expense forecasting engine.
"""

import os
import logging
from datetime import date, datetime
from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config.settings import get_config
from forecasting import ForecastEngine, InvalidInputError, Transaction, prepare_monthly_series
from forecasting.demo_data import HOUSEHOLD_PROFILES, DemoDataGenerator
from forecasting.models import parse_kind, parse_method

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _parse_int(data, key, default, minimum, maximum):
    """Read a bounded integer field from a request payload"""
    raw = data.get(key, default)
    if isinstance(raw, bool):
        raise InvalidInputError(key, "must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(key, "must be an integer")
    if value < minimum or value > maximum:
        raise InvalidInputError(key, f"must be between {minimum} and {maximum}")
    return value


def _parse_as_of(raw):
    """Anchor month for the series; defaults to today"""
    if raw is None:
        return date.today()
    try:
        return datetime.strptime(str(raw)[:10], '%Y-%m-%d').date()
    except ValueError:
        raise InvalidInputError("as_of", f"invalid date {raw!r}")


# =============================================================================
# App Factory
# =============================================================================

def create_app(config_class=None):
    """Create Flask application"""
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        config_class = get_config()
    app.config.from_object(config_class)

    # Rate limiting
    Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[app.config['RATELIMIT_DEFAULT']]
    )

    engine = ForecastEngine.from_config(app.config)
    logger.info(f"{app.config['APP_NAME']} started with {len(engine.estimators)} forecast methods")

    def _build_series(data):
        """Parse transactions and build the monthly series for a request"""
        raw_transactions = data.get('transactions', [])
        if not isinstance(raw_transactions, list):
            raise InvalidInputError("transactions", "must be a list")

        transactions = [Transaction.from_dict(t, index=i) for i, t in enumerate(raw_transactions)]
        kind = parse_kind(data.get('kind', 'expense'))
        months_back = _parse_int(data, 'months_back', 12, 0, app.config['MAX_MONTHS_BACK'])
        as_of = _parse_as_of(data.get('as_of'))

        return prepare_monthly_series(transactions, kind, months_back, as_of=as_of)

    def _insufficient(series):
        minimum = app.config['MIN_FORECAST_MONTHS']
        if len(series) < minimum:
            return jsonify({
                'error': f'Need at least {minimum} months of data for forecasting'
            }), 400
        return None

    # =============================================================================
    # Routes
    # =============================================================================

    @app.route('/health')
    def health():
        """Liveness check"""
        return jsonify({'status': 'ok'})

    # =============================================================================
    # API Routes - Forecasting
    # =============================================================================

    @app.route('/api/forecast', methods=['POST'])
    def api_forecast():
        """Forecast monthly totals with one method"""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise InvalidInputError("body", "must be a JSON object")

        series = _build_series(data)
        rejected = _insufficient(series)
        if rejected:
            return rejected

        horizon = _parse_int(data, 'horizon', 6, 1, app.config['MAX_HORIZON'])
        method = parse_method(data.get('method', 'ensemble'))
        result = engine.forecast(series, horizon, method)

        logger.info(f"Forecast {method.value}: {len(series)} months -> {horizon} ahead ({result.trend.value})")
        return jsonify({
            'success': True,
            'series': [p.to_dict() for p in series],
            'forecast': result.to_dict()
        })

    @app.route('/api/forecast/compare', methods=['POST'])
    def api_forecast_compare():
        """Forecast with every method for side-by-side comparison"""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise InvalidInputError("body", "must be a JSON object")

        series = _build_series(data)
        rejected = _insufficient(series)
        if rejected:
            return rejected

        horizon = _parse_int(data, 'horizon', 6, 1, app.config['MAX_HORIZON'])
        results = engine.forecast_all(series, horizon)

        return jsonify({
            'success': True,
            'series': [p.to_dict() for p in series],
            'forecasts': {name: r.to_dict() for name, r in results.items()}
        })

    @app.route('/api/forecast/demo', methods=['GET'])
    def api_forecast_demo():
        """Forecast over generated demo transactions"""
        args = request.args
        profile = args.get('profile', 'young_family')
        if profile not in HOUSEHOLD_PROFILES:
            raise InvalidInputError("profile", f"unknown profile {profile!r}")

        seed = _parse_int(args, 'seed', 42, 0, 2 ** 31)
        horizon = _parse_int(args, 'horizon', 6, 1, app.config['MAX_HORIZON'])
        months_back = _parse_int(args, 'months_back', 24, 3, app.config['MAX_MONTHS_BACK'])
        kind = parse_kind(args.get('kind', 'expense'))
        method = parse_method(args.get('method', 'ensemble'))
        as_of = _parse_as_of(args.get('as_of'))

        household = DemoDataGenerator(seed=seed).generate_household(profile, months=months_back, as_of=as_of)
        series = prepare_monthly_series(household.transactions, kind, months_back, as_of=as_of)
        result = engine.forecast(series, horizon, method)

        return jsonify({
            'success': True,
            'household': household.name,
            'series': [p.to_dict() for p in series],
            'forecast': result.to_dict()
        })

    # =============================================================================
    # Error Handlers
    # =============================================================================

    @app.errorhandler(InvalidInputError)
    def invalid_input(e):
        logger.info(f"Rejected forecast request: {e}")
        return jsonify({'error': e.message, 'field': e.field}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f"Server error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


# =============================================================================
# Main
# =============================================================================

if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'True').lower() == 'true'
    app.run(debug=debug, port=port, host='0.0.0.0')
