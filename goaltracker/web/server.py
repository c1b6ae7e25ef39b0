"""
Goal Tracker Web API: Flask backend for report generation.

Provides REST endpoints for:
- /api/health: Liveness and version
- /api/generate: Generate a weekly report from pasted documents
"""

from flask import Flask, jsonify, request
from flask_cors import CORS

from goaltracker import __version__
from goaltracker.core.engine import Engine
from goaltracker.core.errors import GoalTrackerError
from goaltracker.core.logging import LogChannel, get_logger
from goaltracker.core.pipelines import build_request, run_request, setup_default_pipeline
from goaltracker.ir.enums import ReportStatus, SubjectKey
from goaltracker.rules.loader import list_rulesets

app = Flask(__name__)
CORS(app)

log = get_logger(LogChannel.SYSTEM)

# Initialize engine once
_engine = None


def get_engine() -> Engine:
    """Get or create the report engine."""
    global _engine
    if _engine is None:
        _engine = Engine()
        setup_default_pipeline(_engine)
    return _engine


TEXT_FIELDS = ('student_name', 'transcript_text', 'goal_info_text', 'tracker_text')


def _check_payload(data) -> None:
    """Reject shapes the pipeline cannot take; raises ValueError."""
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    for key in TEXT_FIELDS:
        if data.get(key) is not None and not isinstance(data[key], str):
            raise ValueError(f"{key} must be a string")
    rows = data.get('tracker_rows')
    if rows is not None and not (
        isinstance(rows, list) and all(isinstance(row, list) for row in rows)
    ):
        raise ValueError("tracker_rows must be a list of rows")


def _parse_overrides(data) -> dict[SubjectKey, bool]:
    if not data:
        return {}
    if not isinstance(data, dict):
        raise ValueError("completion_overrides must be an object")
    overrides = {}
    for key, value in data.items():
        if not isinstance(value, bool):
            raise ValueError(f"completion_overrides.{key} must be true or false")
        overrides[SubjectKey.from_string(key)] = value
    return overrides


# =============================================================================
# API Routes
# =============================================================================

@app.route('/api/health', methods=['GET'])
def health():
    """Liveness check."""
    return jsonify({'status': 'ok', 'version': __version__})


@app.route('/api/generate', methods=['POST'])
def generate():
    """Generate a weekly report from inline documents."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        _check_payload(data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    # Rows take precedence over pasted table text
    tracker = data.get('tracker_rows') or data.get('tracker_text')

    # Only bundled rulesets; the API never loads arbitrary paths
    ruleset = data.get('ruleset')
    if ruleset is not None and ruleset not in list_rulesets():
        return jsonify({'error': f"Unknown ruleset: {ruleset}"}), 400

    try:
        overrides = _parse_overrides(data.get('completion_overrides'))
        report_request = build_request(
            data.get('student_name'),
            data.get('transcript_text'),
            tracker,
            data.get('goal_info_text'),
            completion_overrides=overrides,
            ruleset=ruleset,
        )
    except (GoalTrackerError, ValueError) as e:
        return jsonify({'error': str(e)}), 400

    result = run_request(report_request, get_engine())

    payload = {
        'id': result.request_id,
        'status': result.status.value,
        'report_text': result.report_text,
        'goal_info': result.goal_info.model_dump(mode='json'),
        'tracker': result.tracker.model_dump(mode='json')['tasks'],
        'transcript': result.transcript.model_dump(mode='json'),
        'diagnostics': [
            {
                'level': d.level.value,
                'code': d.code,
                'message': d.message,
                'source': d.source,
            }
            for d in result.diagnostics
        ],
        'processing_time_ms': round(result.processing_duration_ms),
    }

    if result.status == ReportStatus.ERROR or result.report_text is None:
        log.error("api_generate_failed", request_id=result.request_id)
        payload['error'] = 'Report generation failed'
        return jsonify(payload), 500

    return jsonify(payload)


if __name__ == '__main__':
    print("Goal Tracker API starting...")
    print("   Open: http://localhost:5050")
    app.run(debug=True, port=5050, use_reloader=False)
