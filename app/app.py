import logging
import os
import threading
from typing import Optional, Tuple, Union

from flask import Flask, jsonify, Response

from fibcalc import InvalidArgumentError, Strategy, create_calculator, summarize

logger = logging.getLogger(__name__)

DEFAULT_MAX_INDEX = 100000


def create_app(strategy: Optional[Union[Strategy, str]] = None, max_index: Optional[int] = None) -> Flask:
    if strategy is None:
        strategy = os.environ.get("FIB_STRATEGY", Strategy.MEMOIZED.value)
    if max_index is None:
        max_index = int(os.environ.get("FIB_MAX_INDEX", str(DEFAULT_MAX_INDEX)))

    calculator = create_calculator(strategy)
    strategy_name = strategy.value if isinstance(strategy, Strategy) else strategy.strip().lower()
    # The memoized cache is not safe for concurrent writers.
    lock = threading.Lock()

    app = Flask(__name__)
    app.config["FIB_STRATEGY"] = strategy_name
    app.config["FIB_MAX_INDEX"] = max_index
    app.config["CALCULATOR"] = calculator
    logger.info(f"Serving Fibonacci numbers with the {strategy_name} strategy")

    @app.errorhandler(InvalidArgumentError)
    def handle_invalid_argument(error: InvalidArgumentError) -> Tuple[Response, int]:
        return jsonify({"error": str(error)}), 400

    @app.route('/fib/<int(signed=True):n>')
    def get_fib(n: int) -> Tuple[Response, int]:
        if n > max_index:
            raise InvalidArgumentError(f"Fibonacci index cannot exceed {max_index}, got {n}")
        with lock:
            result = calculator.get_fibonacci(n)
        return jsonify({"n": n, "fib": result, "strategy": strategy_name}), 200

    @app.route('/fib/upto/<int(signed=True):limit>')
    def get_fib_up_to(limit: int) -> Tuple[Response, int]:
        with lock:
            summary = summarize(calculator, limit)
        summary["strategy"] = strategy_name
        return jsonify(summary), 200

    @app.route('/metrics')
    def get_metrics() -> Tuple[Response, int]:
        with lock:
            snapshot = calculator.metrics.snapshot()
        return jsonify({"strategy": strategy_name, **snapshot}), 200

    @app.route('/cache', methods=['DELETE'])
    def clear_cache() -> Tuple[Response, int]:
        with lock:
            calculator.clear_cache()
        logger.info("Calculator cache cleared")
        return jsonify({"status": "cleared"}), 200

    @app.route('/health')
    def health_check() -> Tuple[Response, int]:
        return jsonify({"status": "healthy"}), 200

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    create_app().run(host='0.0.0.0', port=int(os.environ.get("PORT", "8080")))
