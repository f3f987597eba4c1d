"""Pydantic schemas for stored documents and API payloads.

Field names follow the JSON contract the frontend already speaks (camelCase).
"""

import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# --- Stored documents ---
class ChatMessage(BaseModel):
    text: str
    isAi: bool
    timestamp: Optional[datetime.datetime] = None


class Chat(BaseModel):
    id: str
    userId: str
    messages: List[ChatMessage] = []
    title: str = "New Chat"
    createdAt: Optional[datetime.datetime] = None


class AiModel(BaseModel):
    id: str
    name: str
    modelName: str
    systemPrompt: str
    userId: str


class User(BaseModel):
    id: str
    username: str
    password: str  # bcrypt hash, never returned by the API
    createdAt: Optional[datetime.datetime] = None


# --- Accounts ---
class Credentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str
    username: str


class MessageResponse(BaseModel):
    message: str


# --- Chat relay ---
class ChatRequest(BaseModel):
    message: str
    chatId: Optional[str] = None
    modelId: str


class ChatReply(BaseModel):
    response: str
    chatId: str


# --- Model registry ---
class CreateModelRequest(BaseModel):
    name: str = Field(..., min_length=1)
    modelName: str = Field(..., min_length=1)
    systemPrompt: Optional[str] = None
