# ppledger

Building blocks for a small proof-of-stake ledger. The package has no
dependencies outside the standard library.

## Modules

- `ppledger.errors`: `LedgerError`, the exception raised throughout the
  package. It carries a `message` and a numeric `code` (`-1` when no
  specific code applies).
- `ppledger.lib`: `Lib().version()` returns the library version string.
- `ppledger.logger`: named loggers held in a process-wide registry
  (`get_logger(name)`, `get_root_logger()`). Each `Logger` starts with a
  `ConsoleHandler` writing to standard output; `add_file_handler(filename,
  level)` appends to a file and returns the `FileHandler`. Messages are
  formatted as `[YYYY-MM-DD HH:MM:SS.mmm] [LEVEL] [name] message` and
  filtered both by the logger's `level` and by each handler's `level`
  (`Level.DEBUG` to `Level.CRITICAL`). `redirect_to(name)` forwards every
  later message to another named logger; `clear_redirect()` undoes it.
- `ppledger.module`: `Module`, a base class whose `log` property is the
  logger registered under the module's name, with `redirect_logger` and
  `clear_logger_redirect`.
- `ppledger.tcp_client`: `TcpClient`, a blocking IPv4 client with
  `connect`, `send`, `receive`, `receive_line` (reads to `\n`, dropping
  `\r`) and `close`; usable as a context manager.
- `ppledger.tcp_server`: `TcpServer`, a non-blocking IPv4 listener with
  `listen(port, backlog)`, `wait_for_events(timeout_ms)` and `accept()`,
  which returns a `TcpConnection` exposing `send`, `receive`,
  `receive_line`, `close`, `client_address` and `client_port`. `port`
  reports the bound port (useful after listening on port 0).
- `ppledger.client`: the `Client` component and the `pp-ledger-client`
  command.
- `ppledger.interfaces`: the abstract `Block` dataclass (index, timestamp,
  data, previous hash, hash, nonce, slot, slot leader; subclasses supply
  `calculate_hash`) and the abstract `BlockChain`.
- `ppledger.ouroboros`: `Ouroboros` keeps stakeholders and slot timing,
  selects a deterministic stake-weighted leader per slot, validates blocks
  against a chain and applies the longest-chain rule with a density check.
  Failures raise `LedgerError` with codes 1 to 7.
- `ppledger.vrf`: `VRF` (a deterministic, hash-based stand-in for a
  verifiable random function: `evaluate`, `verify`, `check_leadership`)
  and `EpochNonce` (`generate`, `genesis_nonce`).
- `ppledger.epoch`: `EpochManager` for epoch boundaries, nonces and slot
  leader assignments, and `SlotTimer` for slot arithmetic relative to a
  genesis time.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
pp-ledger-client <host> <port>
```

The command logs its version to the root logger, adds a file handler
writing to `client.log` in the current directory, marks a `Client` as
connected to the given host and port, waits for Enter and then
disconnects. It exits with status 1 if the host or port is missing or the
port is not a number.

## Example

```python
from ppledger.ouroboros import Ouroboros

consensus = Ouroboros(slot_duration=1, slots_per_epoch=100)
consensus.register_stakeholder("alice", 700)
consensus.register_stakeholder("bob", 300)

leader = consensus.get_slot_leader(42)
print(leader, consensus.is_slot_leader(42, leader))
print(consensus.total_stake())  # 1000
```

```python
from ppledger.logger import Level, get_logger

log = get_logger("node")
log.add_file_handler("node.log", Level.DEBUG)
log.info("started")
```

```python
from ppledger.tcp_server import TcpServer
from ppledger.tcp_client import TcpClient

with TcpServer() as server, TcpClient() as client:
    server.listen(0)
    client.connect("127.0.0.1", server.port)
    server.wait_for_events(1000)
    connection = server.accept()
    client.send("hello\r\n")
    print(connection.receive_line())  # hello
    connection.close()
```

## What the package does not do

- `Client.connect` does not open a network connection; it only records
  that the client is connected. The `pp-ledger-client` command therefore
  never talks to a server.
- There is no server command and no ledger node: nothing ties the TCP
  transport, the consensus rules and the epoch bookkeeping together.
- There is no peer-to-peer networking, block storage, or concrete
  `Block`/`BlockChain` implementation; callers subclass the abstract types
  in `ppledger.interfaces`.
- `VRF` and the slot leader hash are simple FNV-style hashes, not
  cryptographic primitives.