"""Address and identifier helpers for DHT nodes.

.. include:: ../../README.md
"""
from loguru import logger

from .address import (
    Address,
    compare_addresses,
    create_addr_port,
    create_udp_addr,
    format_sockaddr,
    parse_addr_port,
    resolve_addr_port,
    validate_host_port,
)
from .errors import (
    DecodeError,
    DHTError,
    EntropyError,
    InvalidHostError,
    InvalidIdentifierError,
    InvalidPortError,
    ParseError,
    ResolutionError,
)
from .identifier import (
    ID_LENGTH,
    decode_id,
    decode_node_id,
    encode_id,
    generate_id,
    random_bytes,
)

logger.disable("dhtnet")

__all__=[
    'Address',
    'compare_addresses',
    'create_addr_port',
    'create_udp_addr',
    'format_sockaddr',
    'parse_addr_port',
    'resolve_addr_port',
    'validate_host_port',
    'DecodeError',
    'DHTError',
    'EntropyError',
    'InvalidHostError',
    'InvalidIdentifierError',
    'InvalidPortError',
    'ParseError',
    'ResolutionError',
    'ID_LENGTH',
    'decode_id',
    'decode_node_id',
    'encode_id',
    'generate_id',
    'random_bytes',
]
