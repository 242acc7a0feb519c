# tictacnet

Play tic-tac-toe with a friend over the network, chat across a UDP link
that resends every chunk until it is acknowledged, and use a handful of
small command-line text tools. Everything is pure Python with no
third-party dependencies.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Tic-tac-toe

Two players connect to one server. The first player to connect plays `X`
and moves first; the second plays `O`. Moves are entered as
`<row> <column>`, each between 1 and 3. After every move both players see
the board:

```
-----------------
|R\C| 1 | 2 | 3 |
-----------------
| 1 | X |   |   |
-----------------
| 2 |   | O |   |
-----------------
| 3 |   |   |   |
-----------------
```

Choosing a cell that is already taken gets a message saying so, and the
same player moves again. When a game ends in a win or a tie, each player
is asked whether to play again. Answer `yes` or `no`; a rematch starts
only if both say yes. Any other answer ends the player.

### Over TCP

Start the server, then two players, each in its own terminal:

```
tictacnet-tcp-server
tictacnet-tcp-player
tictacnet-tcp-player
```

### Over UDP

```
tictacnet-udp-server
tictacnet-udp-player
tictacnet-udp-player
```

All four commands take an optional IPv4 address (default `127.0.0.1`);
the game always uses port 8080.

```
tictacnet-tcp-server 192.168.1.10
tictacnet-tcp-player 192.168.1.10
```

The building blocks are available for your own programs:

- `tictacnet.board.Board` holds the grid (`place`, `is_free`, `is_full`,
  `winner`, `clear`) and draws the table above with `render(prefix)`.
- `tictacnet.game.Game` applies moves received as text with
  `apply_move(request)` and returns a `MoveResult` whose `outcome` is an
  `Outcome` (`OCCUPIED`, `MOVED`, `TIE` or `WON`) and whose `replies` hold
  the message for each piece; `rematch_decision` settles the rematch.
- `tictacnet.tcp_server.TcpGameServer` and
  `tictacnet.udp_server.UdpGameServer` referee matches; `serve()` runs
  until a rematch is declined.

## Reliable chat over UDP

A server and a client take turns sending lines of text, starting with the
server. Each message is split into five-byte numbered chunks; the receiver
acknowledges every chunk, and the sender resends any chunk still
unacknowledged every 0.1 seconds, logging each resend to `serverlog.txt`
or `clientlog.txt` in the current directory (both are emptied at start).
To exercise the resending, the server leaves every third chunk of a
message unacknowledged the first time it arrives. Sending `bye` ends the
conversation.

```
tictacnet-chat-server
tictacnet-chat-client
```

Both sides use `127.0.0.1`, port 8080. The chunk format lives in
`tictacnet.chunking` (`DataPacket`, `split_into_chunks`, `reassemble`,
`format_ack`, `parse_ack`), and the send/acknowledge loop in
`tictacnet.chat.ReliableChannel` (`send_message`, `receive_message`).

## Text tools

```
tictacnet-grep PATTERN [FILE ...]   # print lines matching PATTERN
tictacnet-wc [FILE ...]             # lines, words and bytes
tictacnet-cat [FILE ...]            # copy files (or stdin) to stdout
tictacnet-echo [WORD ...]           # print the words separated by spaces
```

`tictacnet-grep` understands a deliberately small pattern language:

| Pattern | Meaning                                  |
|---------|------------------------------------------|
| `c`     | the literal character `c`                |
| `.`     | any single character                     |
| `c*`    | zero or more of the preceding character  |
| `^`     | anchor at the start of the line          |
| `$`     | anchor at the end of the line            |

Only complete, newline-terminated lines are reported.

```python
from tictacnet.grep import match

match("^ab*c$", "abbbc")   # True
match("b.d", "abcde")      # True
```

## Library extras

- `tictacnet.uprintf.xformat` formats text with the small set of
  directives `%d`, `%l`, `%x` (upper-case hex), `%p`, `%s`, `%c` and `%%`.
- `tictacnet.shparse.parse_command` parses a shell command line with
  pipes, `;`, `&`, parentheses and `<`, `>`, `>>` redirections into a tree
  of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd` nodes, and
  raises `ShellSyntaxError` on malformed input. A simple command may have
  at most nine words.

```python
from tictacnet.shparse import parse_command

tree = parse_command("cat < in.txt | grep x > out.txt")
```

## What this package does not do

- There is no shell: `parse_command` only builds the command tree; nothing
  in the package runs it.
- The chat address and port are fixed; the chat commands take no options.
- Neither game server handles more than one pair of players, and the UDP
  game has no resending of lost datagrams.