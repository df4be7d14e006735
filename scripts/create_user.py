# scripts/create_user.py

"""
명령줄에서 사용자 계정을 생성하는 스크립트입니다.

API 서버를 거치지 않고 UserService를 직접 사용하므로, 검증/중복 검사/비밀번호 해싱 규칙은
POST /api/users 와 동일하게 적용됩니다.

사용 예:
    python -m scripts.create_user --username admin --first-name Admin
"""

import asyncio
import logging

import typer

from app.core.config import settings
from app.core.database import create_db_and_tables, get_async_session_context
from app.core.exceptions import AppException, ValidationError
from app.core.logging import configure_logging
from app.core.validation import SchemaValidator
from app.domains.usr import models as usr_models
from app.domains.usr.crud import CRUDUser
from app.domains.usr.services import UserService

logger = logging.getLogger(__name__)

cli = typer.Typer()


async def create_user(
    username: str,
    password: str,
    first_name: str = "",
    last_name: str = "",
) -> usr_models.User:
    """
    독립 세션에서 사용자를 생성합니다. 세션은 정상 종료 시 커밋, 예외 시 롤백됩니다.
    """
    if settings.AUTO_MIGRATE:
        await create_db_and_tables()

    async with get_async_session_context() as db:
        service = UserService(CRUDUser(db), SchemaValidator())
        return await service.create({
            "username": username,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
        })


@cli.command()
def main(
    username: str = typer.Option(
        ..., '--username', '-u',
        prompt="사용자명을 입력하세요",
        help="로그인에 사용할 사용자명입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="비밀번호 (8~72자)."
    ),
    first_name: str = typer.Option("", '--first-name', help="이름"),
    last_name: str = typer.Option("", '--last-name', help="성"),
):
    """
    새로운 사용자 계정을 생성합니다.
    """
    configure_logging(settings.LOG_LEVEL)

    try:
        user = asyncio.run(create_user(username, password, first_name, last_name))
    except ValidationError as e:
        for field, message in e.fields.items():
            typer.echo(f"오류: {field}: {message}", err=True)
        raise typer.Exit(code=1)
    except AppException as e:
        typer.echo(f"오류: {e.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"사용자 '{user.username}' (id={user.id}) 생성이 완료되었습니다.")


if __name__ == "__main__":
    cli()
