#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Builds the same ConversationController the API uses
- Sends typed lines as text submissions
- /1 and /2 pick the offered options, /image <path> attaches a menu photo
- Prints every assistant message as it is appended
"""

from __future__ import annotations

import asyncio
import mimetypes
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

from menu_analyst.domain.entities.message import Message, MessageRole
from menu_analyst.main import configure_logging
from menu_analyst.wiring.dependencies import build_controller


def _print_header() -> None:
    print("\nMenu Analyst - Local Chat Harness")
    print("-" * 60)
    print("Paste menu text (one dish per line, end with an empty line) or type a reply.")
    print("Commands: /1 /2 (choose option), /image <path>, /history, /quit, /help")
    print("-" * 60)


def _print_message(message: Message) -> None:
    if message.role is not MessageRole.ASSISTANT:
        return
    print(f"\n(assistant) {message.content}")
    for i, option in enumerate(message.options, 1):
        print(f"  /{i} {option}")


async def _read_block() -> str | None:
    """Read lines until an empty one; a single-line entry is returned as-is."""
    lines: list[str] = []
    while True:
        try:
            line = await asyncio.to_thread(input, "\n> " if not lines else "  ")
        except (EOFError, KeyboardInterrupt):
            return None
        if not line.strip():
            return "\n".join(lines)
        if not lines and line.startswith("/"):
            return line.strip()
        lines.append(line)


async def main() -> None:
    load_dotenv()
    configure_logging("WARNING")

    controller = build_controller()
    for message in controller.message_log.messages():
        _print_message(message)
    controller.message_log.subscribe(_print_message)
    _print_header()

    while True:
        user_text = await _read_block()
        if user_text is None:
            print("\nBye!")
            return
        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            _print_header()
            continue
        if cmd == "/history":
            print("\n--- History ---")
            for item in controller.message_log.messages():
                print(f"{item.role.value}: {item.content}")
            continue
        if cmd in ("/1", "/2"):
            last = controller.message_log.last()
            options = last.options if last else ()
            index = int(cmd[1:]) - 1
            if index < len(options):
                await controller.select_option(options[index])
            else:
                print("(no such option)")
            continue
        if cmd.startswith("/image"):
            path = Path(user_text[len("/image"):].strip()).expanduser()
            if not path.is_file():
                print(f"(file not found: {path})")
                continue
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            await controller.submit_image(path.read_bytes(), mime_type=mime_type, filename=path.name)
            continue

        await controller.submit_text(user_text)


if __name__ == "__main__":
    asyncio.run(main())
