# surfspot/api/responses.py
from typing import Any

from flask import jsonify
from marshmallow import ValidationError

def _first_message(messages: Any) -> str:
    """marshmallow 오류 메시지 구조(dict/list 중첩)에서 첫 번째 메시지를 꺼냅니다."""
    if isinstance(messages, dict):
        for value in messages.values():
            return _first_message(value)
        return "Invalid request"
    if isinstance(messages, (list, tuple)):
        return _first_message(messages[0]) if messages else "Invalid request"
    return str(messages)

def error_response(message: str, status_code: int):
    return jsonify({"error": message}), status_code

def validation_error_response(err: ValidationError):
    """400 응답. error에는 사람이 읽을 첫 메시지, details에는 필드별 메시지가 담깁니다."""
    return jsonify({"error": _first_message(err.messages), "details": err.normalized_messages()}), 400
