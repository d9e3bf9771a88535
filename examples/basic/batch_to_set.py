"""Rewrite `; name=value` lines of a batch-like script into SET statements."""

from splicer import Engine, TraceRecorder, compile

SOURCE = "@echo off\r\n\r\nfn main()\r\n{-\r\n\t; A=B\r\n-}\r\n"

pattern = compile(";[name]=[value]\n")
recorder = TraceRecorder()

with Engine(SOURCE, trace=recorder) as engine:
    engine.apply(
        pattern,
        lambda m: m.replace(
            f"SET {m.get_value('name').strip()}={m.get_value('value').strip()}\n"
        ),
        label="test card",
    )

print(engine.text)
print("\n".join(recorder.lines()))
