"""Two-party terminal chat over UDP with chunked messages and acknowledgements."""

from __future__ import annotations

import contextlib
import socket
import sys
import threading
from typing import Optional, Sequence, TextIO

from tictacnet.chunking import (
    MAX_MSG_SIZE,
    PORT,
    DataPacket,
    format_ack,
    parse_ack,
    reassemble,
    split_into_chunks,
)

SERVER_IP = "127.0.0.1"
SERVER_LOG = "./serverlog.txt"
CLIENT_LOG = "./clientlog.txt"
SERVER_GREETING = "Oh hello client! lets talk.."
CLIENT_GREETING = "Hi, I'm Suzi"
RETRY_INTERVAL = 0.1

_ACK_SIZE = 99
_PACKET_RECV_SIZE = 1024


class ReliableChannel:
    """Sends messages as numbered chunks and resends any chunk left unacknowledged."""

    def __init__(
        self,
        sock: socket.socket,
        peer: Optional[tuple] = None,
        log_path: Optional[str] = None,
        retry_interval: float = RETRY_INTERVAL,
    ):
        if retry_interval <= 0:
            raise ValueError("retry interval must be positive")
        self.sock = sock
        self.peer = peer
        self.log_path = log_path
        self.retry_interval = retry_interval
        self._lock = threading.Lock()

    def _log_file(self):
        if self.log_path is None:
            return contextlib.nullcontext(None)
        return open(self.log_path, "a", encoding="utf-8")

    def _retransmit(self, packets: list, acked: list, done: threading.Event) -> None:
        with self._log_file() as log:
            while not done.wait(self.retry_interval):
                with self._lock:
                    missing = [index for index, ok in enumerate(acked) if not ok]
                    peer = self.peer
                if not missing:
                    return
                for index in missing:
                    if log is not None:
                        log.write(
                            f"Missing acknowledgement for chunk {index}. "
                            "Hence resending it again.\n"
                        )
                        log.flush()
                    try:
                        self.sock.sendto(packets[index].pack(), peer)
                    except OSError:
                        return

    def send_message(self, message: str) -> int:
        """Send ``message`` and wait until every chunk is acknowledged.

        Returns the number of chunks the message was cut into.
        """
        if self.peer is None:
            raise RuntimeError("no peer to send to")
        packets = split_into_chunks(message)
        total = len(packets)
        if not total:
            return 0
        acked = [False] * total
        done = threading.Event()
        retrier = threading.Thread(
            target=self._retransmit, args=(packets, acked, done), daemon=True
        )
        retrier.start()
        try:
            for packet in packets:
                self.sock.sendto(packet.pack(), self.peer)
            while True:
                with self._lock:
                    if all(acked):
                        break
                data, sender = self.sock.recvfrom(_ACK_SIZE)
                try:
                    index = parse_ack(data)
                except ValueError:
                    text = data.decode("utf-8", errors="replace")
                    print(f"Well this is not supposed to happen <{text}> <{len(data)}>")
                    continue
                with self._lock:
                    acked[index % total] = True
                    self.peer = sender
        finally:
            done.set()
            retrier.join()
        return total

    def receive_message(self, skip_acks: bool = False) -> str:
        """Receive one whole message, acknowledging each chunk stored.

        With ``skip_acks`` every third chunk of the first round is dropped
        unacknowledged, so the sender has to resend it.
        """
        stored: dict[int, DataPacket] = {}
        num_chunks: Optional[int] = None
        arrivals = 0
        while num_chunks is None or len(stored) < num_chunks:
            data, sender = self.sock.recvfrom(_PACKET_RECV_SIZE)
            if data.startswith(b"ACK"):
                continue
            try:
                packet = DataPacket.unpack(data)
            except ValueError:
                continue
            if packet.num_chunks <= 0:
                continue
            num_chunks = packet.num_chunks
            with self._lock:
                self.peer = sender
            position = arrivals
            arrivals += 1
            if skip_acks and position < num_chunks and position % 3 == 0:
                continue
            index = packet.seq_no % num_chunks
            stored[index] = packet
            self.sock.sendto(format_ack(index).encode(), sender)
        return reassemble(stored.values())


def _send_turn(channel: ReliableChannel, other: str, stdin: TextIO, stdout: TextIO) -> bool:
    stdout.write(f"\033[0m\n\033[34mChat with {other}: \033[0m\033[32m")
    stdout.flush()
    line = stdin.readline()
    stdout.write("\033[0m")
    if not line:
        return False
    message = line[:-1] if line.endswith("\n") else line
    channel.send_message(message)
    if message == "bye":
        stdout.write("\n\n\033[31mExiting...\033[0m\n")
        stdout.flush()
        return False
    return True


def _receive_turn(channel: ReliableChannel, other: str, skip_acks: bool, stdout: TextIO) -> bool:
    stdout.write(f"\n\nWaiting for {other.lower()} to send message\n")
    stdout.flush()
    message = channel.receive_message(skip_acks)
    stdout.write(f"\n\n\033[33mFrom {other}: {message}\033[0m\n\n")
    stdout.flush()
    if message == "bye":
        stdout.write(f"\n\n\033[31mChat with {other} has ended\033[0m\n")
        stdout.flush()
        return False
    return True


def server_main(argv: Optional[Sequence[str]] = None) -> int:
    """Wait for a client, then alternate: send first, receive second."""
    open(SERVER_LOG, "w").close()
    stdin, stdout = sys.stdin, sys.stdout
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        print("Could not create socket")
        return 1
    with sock:
        try:
            sock.bind((SERVER_IP, PORT))
        except OSError:
            print("Failed to bind socket")
            return 1
        print(f"Server is running on port {PORT}...", flush=True)
        _, peer = sock.recvfrom(MAX_MSG_SIZE)
        print("We got a client.", flush=True)
        sock.sendto(SERVER_GREETING.encode() + b"\0", peer)
        channel = ReliableChannel(sock, peer, SERVER_LOG, RETRY_INTERVAL)
        while _send_turn(channel, "Client", stdin, stdout) and _receive_turn(
            channel, "Client", True, stdout
        ):
            pass
    return 0


def client_main(argv: Optional[Sequence[str]] = None) -> int:
    """Greet the server, then alternate: receive first, send second."""
    open(CLIENT_LOG, "w").close()
    stdin, stdout = sys.stdin, sys.stdout
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        print("Could not create socket")
        return 1
    with sock:
        server = (SERVER_IP, PORT)
        sock.sendto(CLIENT_GREETING.encode() + b"\0", server)
        data, server = sock.recvfrom(MAX_MSG_SIZE - 1)
        greeting = data.decode("utf-8", errors="replace").split("\0", 1)[0]
        print(f"Server acknowledged: {greeting}", flush=True)
        channel = ReliableChannel(sock, server, CLIENT_LOG, RETRY_INTERVAL)
        while _receive_turn(channel, "Server", False, stdout) and _send_turn(
            channel, "Server", stdin, stdout
        ):
            pass
    return 0


if __name__ == "__main__":
    sys.exit(server_main())