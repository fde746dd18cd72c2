"""
tcp_host.py — Serve one quiz room over TCP
===========================================

A minimal host for a GameRoom. Every client line is one JSON action
message; every broadcast is written back as one JSON line to all clients.
The question bank is kept in questions.json next to this script.

    python tcp_host.py
    # in other terminals:
    nc localhost 8765
    {"type": "action", "data": {"action": "joinAsPlayer", "args": ["p1", "ANA"]}}
    {"type": "action", "data": {"action": "startGame"}}

Press Ctrl+C to stop.
"""

import asyncio
import itertools
import json
import logging
from pathlib import Path

from quiz_round import GameRoom, load_config
from quiz_round.demo import DEMO_QUESTIONS

# ── Setup logging (so you can see what's happening) ──
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("tcp_host")

HOST = "127.0.0.1"
PORT = 8765
BANK_PATH = Path(__file__).with_name("questions.json")


class JsonFileRepository:
    """QuestionRepository backed by a JSON file."""

    def __init__(self, path):
        self.path = path

    def load(self):
        if not self.path.exists():
            return list(DEMO_QUESTIONS)
        return json.loads(self.path.read_text(encoding="utf-8"))

    def save(self, questions):
        self.path.write_text(json.dumps(questions, indent=2), encoding="utf-8")


class StreamConnection:
    """Connection over an asyncio StreamWriter."""

    def __init__(self, connection_id, writer):
        self.id = connection_id
        self.writer = writer

    def send(self, text):
        self.writer.write(text.encode("utf-8") + b"\n")


async def main():
    clients = {}
    ids = itertools.count(1)

    def broadcast(text):
        for conn in list(clients.values()):
            conn.send(text)

    room = GameRoom("TCP1", broadcast=broadcast, config=load_config(),
                    repository=JsonFileRepository(BANK_PATH))
    room.start()

    async def handle_client(reader, writer):
        conn = StreamConnection(f"tcp-{next(ids)}", writer)
        clients[conn.id] = conn
        room.handle_connect(conn)
        logger.info(f"{conn.id} connected")
        try:
            while line := await reader.readline():
                room.handle_message(line.strip(), conn.id)
                await writer.drain()
        finally:
            del clients[conn.id]
            room.handle_close(conn.id)
            writer.close()
            logger.info(f"{conn.id} disconnected")

    server = await asyncio.start_server(handle_client, HOST, PORT)
    logger.info(f"Room TCP1 listening on {HOST}:{PORT}")
    async with server:
        await server.serve_forever()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
