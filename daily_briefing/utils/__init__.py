from daily_briefing.utils.json_extract import (
    JSONArrayNotFoundError,
    extract_json_array,
    parse_json_array,
)

__all__ = ["JSONArrayNotFoundError", "extract_json_array", "parse_json_array"]
