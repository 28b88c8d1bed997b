"""Minimal demonstration of a single chat invocation."""

import sys

from chat_core.api.service import run_chat

if __name__ == "__main__":
    question = " ".join(sys.argv[1:]) or "长い物語を書いてください。"
    result = run_chat([{"role": "user", "content": question}], model="gpt-4o-mini")
    print("User:", question)
    if result["error"]:
        print("Error:", result["error"])
    print("Response:", result["message"])
