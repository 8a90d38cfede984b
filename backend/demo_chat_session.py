"""Demo script for ChatSession."""
import asyncio
import sys
sys.path.insert(0, '.')

from services.chat_session import ChatSession


async def main():
    """Demo the ChatSession functionality."""
    print("=== ChatSession Demo ===\n")

    session = ChatSession(reply_delay=0.5)
    session.subscribe(
        lambda state: print(f"  [update] turns={len(state.turns)} pending={state.pending}")
    )

    print("1. Seeded greeting:")
    print(f"  bot: {session.get_state().turns[0].text}\n")

    questions = [
        "Tell me about spec-driven basics",
        "What are the best practices?",
        "asdf???",
        "hello there",
    ]

    for i, question in enumerate(questions, 2):
        print(f"{i}. Asking: {question!r}")
        session.submit(question)

        # Ignored: a reply is already pending
        accepted = session.submit("one more thing")
        print(f"  second submit accepted: {accepted}")

        await asyncio.sleep(session.reply_delay + 0.1)
        print(f"  bot: {session.get_state().last_turn.text}\n")

    print(f"{len(questions) + 2}. Closing with a reply in flight...")
    session.submit("how to start")
    session.close()
    await asyncio.sleep(session.reply_delay + 0.1)
    print(f"  last sender after close: {session.get_state().last_turn.sender.value}")

    print("\n=== Demo complete ===")


if __name__ == "__main__":
    asyncio.run(main())
