"""Edit several captures of one match in a single callback.

Edits queued through the handle are committed together after the callback
returns, so their recorded offsets stay valid.
"""

from splicer import Engine, MatchHandle

engine = Engine("(width=10) (height=20)")


def swap(m: MatchHandle) -> None:
    key, value = m.get_value("key"), m.get_value("value")
    m.set_value("key", value)
    m.set_value("value", key.upper())


count = engine.apply("([key]=[value])", swap)
print(count, engine.text)  # 2 (10=WIDTH) (20=HEIGHT)
