"""Profile page -- the three ways a handler can hand data to the renderer.

Each handler returns a Response with a RenderInstruction attached and never
touches the template engine. The shared renderer runs afterwards:

- user_handler: bindings built key by key with Context
- produce_handler: a dataclass converted through the serialization contract
- blob_handler: a raw JSON-like blob

Run:
    python app.py
"""

from dataclasses import dataclass, field
from pathlib import Path

from ferry import (
    Context,
    DeferredRenderer,
    JinjaEngine,
    RenderInstruction,
    Response,
    SerializationError,
    attach,
)

templates_dir = Path(__file__).parent / "templates"
renderer = DeferredRenderer(JinjaEngine.from_directory(templates_dir))


@dataclass
class User:
    username: str
    my_var: str
    numbers: list[int] = field(default_factory=list)
    bio: str = ""


def user_handler() -> Response:
    ctx = Context()
    ctx.insert("username", "Bob")
    ctx.insert("my_var", "Thing")  # drop this line to see the fallback
    ctx.insert("numbers", [1, 2, 3])
    ctx.insert("bio", "<script>alert('pwnd');</script>")
    return attach(Response(), RenderInstruction.from_context("users/profile.html", ctx))


def produce_handler() -> Response:
    user = User("Bob", "Thing", [1, 2, 3], "<script>alert('pwnd');</script>")
    try:
        instruction = RenderInstruction.from_value("users/profile.html", user)
    except SerializationError as e:
        raise e.with_status(400)
    return attach(Response(), instruction)


def blob_handler() -> Response:
    blob = {
        "username": "John Doe",
        "my_var": "Thing",
        "numbers": ["1", "+44 2345678", "3"],
        "bio": "<script>alert('pwnd');</script>",
    }
    return attach(Response(), RenderInstruction.from_value("users/profile.html", blob))


user_output = renderer.process(user_handler()).body
produce_output = renderer.process(produce_handler()).body
blob_output = renderer.process(blob_handler()).body


def main() -> None:
    for label, output in [
        ("Context", user_output),
        ("Serialized dataclass", produce_output),
        ("JSON blob", blob_output),
    ]:
        print(f"=== {label} ===")
        print(output)
        print()


if __name__ == "__main__":
    main()
