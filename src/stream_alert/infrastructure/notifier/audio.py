from __future__ import annotations

import asyncio
import shlex
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from stream_alert.application.ports import NotifierProtocol
from stream_alert.domain.models import FetchedState
from stream_alert.infrastructure.error import AudioPlaybackError
from stream_alert.infrastructure.resources import DEFAULT_DEVICE


class AudioNotifier(NotifierProtocol):
    """Play every alert sound on every device through an external player."""

    def __init__(
        self,
        devices: Sequence[str],
        sounds: Sequence[Path],
        *,
        player_command: str = "aplay -q",
        device_flag: str = "-D",
        repeats: int = 3,
        pause: float = 1.0,
    ) -> None:
        self.devices = list(devices) or [DEFAULT_DEVICE]
        self.sounds = list(sounds)
        self.player = shlex.split(player_command)
        self.device_flag = device_flag
        self.repeats = repeats
        self.pause = pause

    def command(self, device: str, sound: Path) -> list[str]:
        argv = list(self.player)
        if device != DEFAULT_DEVICE:
            argv += [self.device_flag, device]
        argv.append(str(sound))
        return argv

    async def notify_about_broadcast(self, state: FetchedState) -> None:
        logger.info(
            "Playing alert for broadcast {} of user {}",
            state.broadcast_id,
            state.user_id,
        )
        await self.play_all()

    async def play_all(self) -> None:
        for attempt in range(1, self.repeats + 1):
            if attempt > 1:
                await asyncio.sleep(self.pause)
            await self.play_pass()

    async def play_pass(self) -> None:
        """Play each sound on each device once, devices outermost."""
        for device in self.devices:
            for sound in self.sounds:
                await self.play(device, sound)

    async def play(self, device: str, sound: Path) -> None:
        argv = self.command(device, sound)
        logger.debug("Running {}", shlex.join(argv))
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise AudioPlaybackError(
                message=f"Can't start player {argv[0]!r}: {e}",
                context={"device": device, "sound": str(sound)},
            ) from e
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise AudioPlaybackError(
                message=(
                    f"Player exited with {proc.returncode} "
                    f"playing {sound} on {device}"
                ),
                context={
                    "device": device,
                    "sound": str(sound),
                    "returncode": proc.returncode,
                    "stderr": (stderr or b"").decode(errors="replace").strip(),
                },
            )
