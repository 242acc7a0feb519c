[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tictacnet"
version = "0.1.0"
description = "Two-player networked tic-tac-toe over TCP or UDP, a chunked and acknowledged UDP chat, and a few small text tools"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "tic-tac-toe",
    "game",
    "tcp",
    "udp",
    "sockets",
    "chat",
    "grep",
    "wc",
    "shell",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: Communications :: Chat",
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tictacnet-tcp-server = "tictacnet.tcp_server:main"
tictacnet-tcp-player = "tictacnet.tcp_player:main"
tictacnet-udp-server = "tictacnet.udp_server:main"
tictacnet-udp-player = "tictacnet.udp_player:main"
tictacnet-chat-server = "tictacnet.chat:server_main"
tictacnet-chat-client = "tictacnet.chat:client_main"
tictacnet-grep = "tictacnet.grep:main"
tictacnet-wc = "tictacnet.wc:main"
tictacnet-cat = "tictacnet.cat:main"
tictacnet-echo = "tictacnet.echo:main"

[tool.hatch.build.targets.wheel]
packages = ["tictacnet"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
