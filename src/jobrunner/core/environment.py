from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

# pseudo-variable của tiến trình cha, không có nghĩa với child
BOOKKEEPING_KEYS = ("argv", "argc", "_")

_SCALARS = (str, int, float, bool)


def _scalar_to_str(value: Any) -> Optional[str]:
    if not isinstance(value, _SCALARS):
        return None
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def merge_environment(snapshot: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, str]:
    """
    Gộp override lên snapshot env của tiến trình cha.
    - Bỏ argv/argc/_ của cha.
    - Override thắng khi trùng key.
    - Giá trị không phải scalar (list, dict, None...) bị loại hẳn, không stringify.
    """
    merged: Dict[str, Any] = dict(snapshot)
    for key in BOOKKEEPING_KEYS:
        merged.pop(key, None)
    merged.update(overrides)

    env: Dict[str, str] = {}
    for key, value in merged.items():
        rendered = _scalar_to_str(value)
        if rendered is not None:
            env[key] = rendered
    return env
