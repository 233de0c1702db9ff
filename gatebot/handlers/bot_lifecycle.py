"""
Обработчик событий, связанных с жизненным циклом бота в чатах.
(добавление в чат, удаление из чата, изменение прав)
"""
from aiogram import Router
from aiogram.types import ChatMemberAdministrator, ChatMemberUpdated
from loguru import logger

bot_lifecycle_router = Router(name="bot_lifecycle_router")


@bot_lifecycle_router.my_chat_member()
async def handle_my_chat_member(event: ChatMemberUpdated):
    """
    Логирует изменения статуса бота в группах.

    Для исключения участников боту нужны права администратора с
    возможностью банить.
    """
    old_status = event.old_chat_member.status if event.old_chat_member else "None"
    new_member = event.new_chat_member
    new_status = new_member.status
    group_id = event.chat.id
    group_name = event.chat.title

    logger.info(f"🔄 Изменение статуса бота: {old_status} -> {new_status} в '{group_name}' ({group_id})")

    if isinstance(new_member, ChatMemberAdministrator):
        if not new_member.can_restrict_members:
            logger.warning(
                f"⚠️ В группе '{group_name}' ({group_id}) у бота нет права банить: "
                f"участники с просроченной проверкой не будут исключены"
            )
        elif old_status != "administrator":
            logger.success(f"🔥 Бот получил права администратора в группе '{group_name}' ({group_id})")

    elif new_status == "member":
        logger.warning(
            f"⚠️ Бот добавлен в '{group_name}' ({group_id}) без прав администратора: "
            f"исключение по таймауту работать не будет"
        )

    elif new_status in ("kicked", "left"):
        logger.warning(f"🚫 Бот удален из группы '{group_name}' ({group_id})")
