# media_sync/jsonio.py
from __future__ import annotations
import dataclasses, json, logging, sys
from typing import Any, Dict, Optional

def enable_json_logging():
    """Only errors are logged, on stderr, so stdout carries nothing but the JSON envelope."""
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    logging.basicConfig(stream=sys.stderr, level=logging.ERROR)

def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)

def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, default=_plain), file=sys.stdout)
    sys.stdout.flush()

def success(command: str, data: Any = None, meta: Optional[Dict[str, Any]] = None, code: int = 0) -> int:
    payload = {"result": "success", "command": command, "data": data if data is not None else {}}
    if meta:
        payload["meta"] = meta
    _emit(payload)
    return code

def error(command: str, message: str, debug: Optional[Dict[str, Any]] = None,
          data: Any = None, code: int = 1) -> int:
    """Error envelope; data carries whatever was done before the failure (a partial RunReport)."""
    payload = {"result": "error", "command": command, "error": message}
    if data:
        payload["data"] = data
    if debug:
        payload["debug"] = debug
    _emit(payload)
    return code
