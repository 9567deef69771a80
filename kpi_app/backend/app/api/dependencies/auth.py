"""FastAPI 依賴：呼叫者身分。

帳號註冊與登入由外部憑證服務負責；本服務只讀取其轉交的 X-User-Id。
若改接其他驗證方式，覆寫 get_current_user_id 即可。
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Header, HTTPException, status


def get_current_user_id(x_user_id: Annotated[Optional[str], Header()] = None) -> int:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user identity")
    try:
        return int(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user identity") from exc
