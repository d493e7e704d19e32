# app/routers/deps.py

from fastapi import Request

from app.db.mongo import patients_collection
from app.services.chat_relay import ChatRelay


def get_chat_relay(request: Request) -> ChatRelay:
    # Built once in the startup hook, see app.main
    return request.app.state.chat_relay


def get_patients_collection():
    return patients_collection
