"""resolve.py: resolves an endpoint and opens a repl to poke at it."""
import sys

import bpython
from loguru import logger

from dhtnet import (
    create_addr_port,
    create_udp_addr,
    encode_id,
    format_sockaddr,
    generate_id,
)

logger.enable("dhtnet")


def main() -> None:
    """Resolves host and port in both forms, then starts a repl."""
    if len(sys.argv) != 3:
        print("usage: [uv run] python resolve.py host port")
        exit(1)

    host = sys.argv[1]
    port = int(sys.argv[2])

    addr = create_addr_port(host, port)
    sockaddr = create_udp_addr(host, port)
    node_id = generate_id()
    print(f"address: {addr}", file=sys.stderr)
    print(f"sockaddr: {format_sockaddr(sockaddr)}", file=sys.stderr)
    print(f"fresh node id: {encode_id(node_id)}", file=sys.stderr)
    repl_locals = {
        'addr': addr,
        'sockaddr': sockaddr,
        'node_id': node_id,
    }
    print("starting repl. access `addr`, `sockaddr`, `node_id`")
    bpython.embed(locals_=repl_locals)


if __name__ == '__main__':
    main()
