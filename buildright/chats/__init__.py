from buildright.chats.service import TitleUpdate, update_chat_title

__all__ = ["TitleUpdate", "update_chat_title"]
