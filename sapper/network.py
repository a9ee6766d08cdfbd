"""A single peer-to-peer TCP link used for two-player games."""

from __future__ import annotations

import socket
import threading
from typing import Callable

DEFAULT_PORT = 12345
_CONNECT_TIMEOUT = 10.0
_ACCEPT_POLL = 0.2
_READ_SIZE = 4096


class _Signal:
    """A list of callbacks invoked together."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., object]] = []

    def connect(self, slot: Callable[..., object]) -> None:
        self._slots.append(slot)

    def emit(self, *args: object) -> None:
        for slot in list(self._slots):
            slot(*args)


class _Connection:
    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self._open = True
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._open

    def shutdown(self) -> None:
        with self._lock:
            if not self._open:
                return
            self._open = False
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass


class NetworkManager:
    """Either listens for one peer or connects to one, and exchanges bytes.

    Callbacks attached to ``connected``, ``disconnected``, ``data_received``
    (bytes) and ``error_occurred`` (message) run on background threads.
    """

    def __init__(self) -> None:
        self.connected = _Signal()
        self.disconnected = _Signal()
        self.data_received = _Signal()
        self.error_occurred = _Signal()
        self._lock = threading.Lock()
        self._server: socket.socket | None = None
        self._server_stop: threading.Event | None = None
        self._server_thread: threading.Thread | None = None
        self._connection: _Connection | None = None

    def __enter__(self) -> NetworkManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_server()

    @property
    def server_port(self) -> int | None:
        """Port the server listens on, or None when not listening."""
        with self._lock:
            return self._server.getsockname()[1] if self._server else None

    def start_server(self, port: int = DEFAULT_PORT, host: str = "0.0.0.0") -> int:
        """Listen for a peer; returns the port actually bound."""
        with self._lock:
            running = self._server is not None
        if running:
            message = "server is already listening"
            self.error_occurred.emit(message)
            raise RuntimeError(message)
        try:
            listener = socket.create_server((host, port))
        except OSError as exc:
            self.error_occurred.emit(str(exc))
            raise
        listener.settimeout(_ACCEPT_POLL)
        stop = threading.Event()
        thread = threading.Thread(
            target=self._accept_loop, args=(listener, stop), daemon=True
        )
        with self._lock:
            self._server = listener
            self._server_stop = stop
            self._server_thread = thread
        thread.start()
        return listener.getsockname()[1]

    def stop_server(self) -> None:
        """Drop the current peer and stop listening."""
        with self._lock:
            conn, self._connection = self._connection, None
            listener, self._server = self._server, None
            stop, self._server_stop = self._server_stop, None
            thread, self._server_thread = self._server_thread, None
        if conn is not None:
            conn.shutdown()
        if stop is not None:
            stop.set()
        if listener is not None:
            listener.close()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2 * _ACCEPT_POLL + 1)

    def connect_to_host(self, host: str, port: int = DEFAULT_PORT) -> None:
        """Connect to a listening peer, replacing any current link."""
        with self._lock:
            old, self._connection = self._connection, None
        if old is not None:
            old.shutdown()
        try:
            sock = socket.create_connection((host, port), timeout=_CONNECT_TIMEOUT)
        except OSError as exc:
            self.error_occurred.emit(str(exc))
            raise
        sock.settimeout(None)
        self._adopt(sock)
        self.connected.emit()

    def disconnect_from_host(self) -> None:
        with self._lock:
            conn = self._connection
        if conn is not None:
            conn.shutdown()

    def is_connected(self) -> bool:
        with self._lock:
            conn = self._connection
        return conn is not None and conn.is_open

    def send_data(self, data: bytes) -> None:
        """Send bytes to the peer; does nothing when there is none."""
        with self._lock:
            conn = self._connection
        if conn is None or not conn.is_open:
            return
        try:
            conn.sock.sendall(bytes(data))
        except OSError as exc:
            self.error_occurred.emit(str(exc))

    def _accept_loop(self, listener: socket.socket, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                sock, _ = listener.accept()
            except TimeoutError:
                continue
            except OSError:
                break
            if stop.is_set():
                sock.close()
                break
            sock.settimeout(None)
            self._adopt(sock)

    def _adopt(self, sock: socket.socket) -> None:
        conn = _Connection(sock)
        with self._lock:
            old, self._connection = self._connection, conn
        if old is not None:
            old.shutdown()
        threading.Thread(target=self._read_loop, args=(conn,), daemon=True).start()

    def _read_loop(self, conn: _Connection) -> None:
        error: str | None = None
        try:
            while True:
                data = conn.sock.recv(_READ_SIZE)
                if not data:
                    break
                self.data_received.emit(data)
        except OSError as exc:
            if conn.is_open:
                error = str(exc)
        finally:
            conn.shutdown()
            conn.sock.close()
            with self._lock:
                if self._connection is conn:
                    self._connection = None
        if error is not None:
            self.error_occurred.emit(error)
        self.disconnected.emit()