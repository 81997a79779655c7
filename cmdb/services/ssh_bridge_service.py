"""
SSH Bridge Service - relays an interactive SSH shell over a WebSocket
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

import asyncssh
from dotenv import load_dotenv
from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from cmdb.models.server_model import Server

load_dotenv()
logger = logging.getLogger(__name__)

SSH_KNOWN_HOSTS = os.getenv("SSH_KNOWN_HOSTS", "")
SSH_STRICT_HOST_KEYS = os.getenv("SSH_STRICT_HOST_KEYS", "true").lower() != "false"

TERM_TYPE = "xterm-256color"
# (columns, rows)
TERM_SIZE = (80, 40)
READ_SIZE = 4096

SSH_ERRORS = (OSError, ValueError, asyncio.TimeoutError, asyncssh.Error)


class SSHBridge:
    """
    One shell session bridged to one accepted WebSocket

    Three relays run concurrently: remote stdout to the socket, remote
    stderr to the socket and socket input to remote stdin. Socket writes
    go through a single lock. The first relay to finish tears the whole
    session down: process, then SSH connection, then WebSocket.
    """

    def __init__(
        self,
        websocket: WebSocket,
        server: Server,
        known_hosts: Optional[str] = None,
        strict_host_keys: Optional[bool] = None,
    ):
        self.websocket = websocket
        self.server = server
        self.known_hosts = SSH_KNOWN_HOSTS if known_hosts is None else known_hosts
        self.strict_host_keys = (
            SSH_STRICT_HOST_KEYS if strict_host_keys is None else strict_host_keys
        )
        self._send_lock = asyncio.Lock()

    def connect_options(self) -> Dict[str, Any]:
        """Keyword arguments for asyncssh.connect"""
        options: Dict[str, Any] = {
            "port": self.server.ssh_port,
            "username": self.server.ssh_username,
        }
        if self.server.ssh_key_path:
            options["client_keys"] = [self.server.ssh_key_path]

        if not self.strict_host_keys:
            options["known_hosts"] = None
        elif self.known_hosts:
            options["known_hosts"] = self.known_hosts
        return options

    async def run(self) -> None:
        """Dial, relay until either side ends, then tear down"""
        if not self.server.ssh_username:
            await self._send_error("Error: SSH username not configured for this server")
            await self._close_websocket()
            return

        if not self.strict_host_keys:
            logger.warning(
                f"Host key verification disabled for {self.server.ip_address}"
            )

        try:
            conn = await asyncssh.connect(
                self.server.ip_address, **self.connect_options()
            )
        except SSH_ERRORS as e:
            logger.warning(
                f"SSH connection to {self.server.ip_address}:{self.server.ssh_port} "
                f"failed: {str(e)}"
            )
            await self._send_error(f"Error: Failed to connect to SSH server: {str(e)}")
            await self._close_websocket()
            return

        logger.info(f"SSH session opened to server {self.server.id}")
        process = None
        try:
            try:
                process = await conn.create_process(
                    term_type=TERM_TYPE,
                    term_size=TERM_SIZE,
                    encoding="utf-8",
                    errors="replace",
                )
            except SSH_ERRORS as e:
                logger.warning(f"Failed to start shell on {self.server.id}: {str(e)}")
                await self._send_error(f"Error: Failed to start shell: {str(e)}")
                return

            await self._relay(process)
        finally:
            await self._teardown(conn, process)
            logger.info(f"SSH session closed for server {self.server.id}")

    async def _relay(self, process) -> None:
        tasks = [
            asyncio.create_task(self._pump_output(process.stdout), name="stdout"),
            asyncio.create_task(self._pump_output(process.stderr), name="stderr"),
            asyncio.create_task(self._pump_input(process.stdin), name="stdin"),
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for task, result in zip(tasks, results):
            if isinstance(result, WebSocketDisconnect):
                logger.debug(f"WebSocket went away during {task.get_name()} relay")
            elif isinstance(result, Exception):
                logger.warning(f"SSH {task.get_name()} relay failed: {str(result)}")

    async def _pump_output(self, reader) -> None:
        while True:
            data = await reader.read(READ_SIZE)
            if not data:
                return
            await self._send_text(data)

    async def _pump_input(self, writer) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

            data = message.get("text")
            if data is None and message.get("bytes") is not None:
                data = message["bytes"].decode("utf-8", errors="replace")
            if data:
                writer.write(data)

    async def _send_text(self, text: str) -> None:
        async with self._send_lock:
            await self.websocket.send_text(text)

    async def _send_error(self, message: str) -> None:
        """Best-effort single error frame before closing"""
        try:
            await self._send_text(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug(f"Could not deliver error frame: {str(e)}")

    async def _teardown(self, conn, process) -> None:
        if process is not None:
            process.close()
            try:
                await process.wait_closed()
            except SSH_ERRORS as e:
                logger.warning(f"Error closing SSH process: {str(e)}")

        conn.close()
        try:
            await conn.wait_closed()
        except SSH_ERRORS as e:
            logger.warning(f"Error closing SSH connection: {str(e)}")

        await self._close_websocket()

    async def _close_websocket(self) -> None:
        if (
            self.websocket.application_state == WebSocketState.DISCONNECTED
            or self.websocket.client_state == WebSocketState.DISCONNECTED
        ):
            return
        try:
            await self.websocket.close()
        except RuntimeError as e:
            logger.debug(f"WebSocket already closed: {str(e)}")
