# notr/main.py
import sys
import json
import traceback

from notr.config import load_config, load_config_file
from notr.core import analyze_code
from notr.errors import ConfigError


def _print_errors(errors, call_graph=None):
    print(json.dumps({"errors": errors, "call_graph": call_graph}, ensure_ascii=False), file=sys.stdout)


def main(argv=None):
    """
    스크립트 메인 실행 함수.

    사용법: notr [realtime|static] [config.json] < source.py
    """
    argv = sys.argv[1:] if argv is None else argv
    analysis_result = {"errors": [], "call_graph": None}
    try:
        code = sys.stdin.read()
        mode = argv[0].lower() if len(argv) > 0 else 'static'
        config_path = argv[1] if len(argv) > 1 else None

        try:
            config = load_config_file(config_path) if config_path else load_config()
        except ConfigError as e:
            _print_errors([{"message": str(e), "line": 1, "column": 0, "errorType": "ConfigError"}])
            return 2

        try:
            analysis_result = analyze_code(code, mode=mode, conf=config)
            if not isinstance(analysis_result, dict) or 'errors' not in analysis_result or 'call_graph' not in analysis_result:
                raise TypeError(f"analyze_code returned unexpected type: {type(analysis_result)}")
        except Exception as e:
            tb_str = traceback.format_exc()
            analysis_result = {
                "errors": [{"message": f"Critical error during core analysis: {e}\n{tb_str}", "line": 1, "column": 0, "errorType": "CoreAnalysisCrash"}],
                "call_graph": None
            }

        try:
            json_output = json.dumps(analysis_result, ensure_ascii=False, indent=None)
            print(json_output, file=sys.stdout)
        except Exception as e:
            _print_errors([{"message": f"Failed to serialize result: {e}", "line": 1, "column": 0, "errorType": "JSONSerializationError"}])

    except Exception as e:
        tb_str = traceback.format_exc()
        _print_errors([{"message": f"Fatal error in script execution: {e}\n{tb_str}", "line": 1, "column": 0, "errorType": "FatalMainError"}])
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == '__main__':
    run()
