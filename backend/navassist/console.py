from __future__ import annotations

import sys
import uuid
from typing import Iterator, Optional, TextIO

from navassist.core.logger import SessionLogger
from navassist.core.ports import SpeechChannel
from navassist.core.session import DialogueSession

EXIT_WORDS = {"quit", "exit"}


def stdin_transcripts(stream: TextIO = sys.stdin, prompt: str = "you> ") -> Iterator[str]:
    while True:
        sys.stdout.write(prompt)
        sys.stdout.flush()
        line = stream.readline()
        if not line:
            return
        text = line.strip()
        if text.lower() in EXIT_WORDS:
            return
        if text:
            yield text


class PrintSpeaker:
    """Writes replies to a stream; printing finishes immediately, so it reports started and ended at once."""

    def __init__(self, out: TextIO = sys.stdout) -> None:
        self.out = out
        self.channel: Optional[SpeechChannel] = None

    def speak(self, text: str) -> None:
        if self.channel:
            self.channel.started()
        try:
            self.out.write(f"assistant> {text}\n")
        except OSError as ex:
            if self.channel:
                self.channel.error(str(ex))
            return
        if self.channel:
            self.channel.ended()

    def cancel(self) -> None:
        pass


def main() -> None:
    speaker = PrintSpeaker()
    session = DialogueSession(
        SessionLogger(f"console-{uuid.uuid4()}"),
        transcripts=stdin_transcripts(),
        speaker=speaker,
    )
    speaker.channel = session.channel
    session.run()
    if session.channel.last_error:
        print(f"Speaker error: {session.channel.last_error}", file=sys.stderr)


if __name__ == "__main__":
    main()
