"""
Standardized messaging format
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Self

import msgpack  # type: ignore
from ulid import ULID


class MessageId(ULID):
    """
    Unique message ID
    """


class MessageType(ULID):
    """
    Message type ID
    """


class Serializable(ABC):
    """
    Objects that can be packed into a `Message`
    """

    @classmethod
    @abstractmethod
    def message_type(cls) -> MessageType:
        """
        :return: the message type that identifies how to unpack the message data
        """

    @abstractmethod
    def pack(self) -> bytes:
        """
        Packs the object into bytes
        """

    @classmethod
    @abstractmethod
    def unpack(cls, packed: bytes) -> Self:
        """
        Unpacks the object from bytes
        """

    def to_message(self) -> "Message":
        """
        Wraps the packed object in a new Message
        """
        return Message.create(self.message_type(), self.pack())

    @classmethod
    def from_message(cls, msg: "Message") -> Self:
        """
        :exception ValueError: if the message type does not match
        """
        if msg.msg_type != cls.message_type():
            raise ValueError(
                f"invalid message type: {msg.msg_type} != {cls.message_type()}"
            )
        return cls.unpack(msg.data)


@dataclass(slots=True)
class Message:
    """
    Message

    :field:`id` - unique message ID
    :field:`type` - message type
    :field:`data` - msgpack serialization format
    """

    msg_id: MessageId
    msg_type: MessageType
    data: bytes

    @classmethod
    def create(cls, msg_type: MessageType, data: bytes) -> "Message":
        """
        Constructor
        """
        return cls(
            msg_id=MessageId(),
            msg_type=msg_type,
            data=data,
        )

    @classmethod
    def unpack(cls, packed: bytes) -> "Message":
        """
        deserializes the message
        """
        (msg_id, msg_type, data) = msgpack.unpackb(packed, use_list=False)
        return cls(
            msg_id=MessageId.from_bytes(msg_id),
            msg_type=MessageType.from_bytes(msg_type),
            data=data,
        )

    def pack(self) -> bytes:
        """
        Serialize the message
        """
        return msgpack.packb((self.msg_id.bytes, self.msg_type.bytes, self.data))
