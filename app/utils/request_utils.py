# app/utils/request_utils.py
from flask import request

TRUTHY_VALUES = ('1', 'true', 'yes', 'y')


def is_confirmed() -> bool:
    """삭제 등 되돌릴 수 없는 요청의 확인 여부. 쿼리 파라미터 ?confirm=true 로 전달합니다."""
    return request.args.get('confirm', '', type=str).strip().lower() in TRUTHY_VALUES
