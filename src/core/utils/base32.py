"""Codec Base32 (alfabeto RFC 4648) sin relleno.

Diferencias con `base64.b32encode`/`b32decode`:
- `encode` no emite `=` de relleno.
- `decode` no exige relleno ni longitud válida: ignora los caracteres fuera del
  alfabeto y acepta minúsculas. Devuelve `n*5//8` bytes, siendo `n` el número
  de caracteres aceptados; los bits sobrantes se descartan.
"""

from __future__ import annotations

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_LOOKUP = {ch: i for i, ch in enumerate(ALPHABET)}
_LOOKUP.update({ch.lower(): i for ch, i in list(_LOOKUP.items()) if ch.isalpha()})


def encode(data: bytes) -> str:
    out: list[str] = []
    buffer = 0
    bits = 0
    for byte in data:
        buffer = ((buffer << 8) | byte) & 0xFFF
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append(ALPHABET[(buffer >> bits) & 0x1F])
    if bits:
        out.append(ALPHABET[(buffer << (5 - bits)) & 0x1F])
    return "".join(out)


def encode_str(source: str, encoding: str = "utf-8") -> str:
    return encode(source.encode(encoding))


def decode(source: str) -> bytes:
    digits = [_LOOKUP[ch] for ch in source if ch in _LOOKUP]
    size = len(digits) * 5 // 8

    out = bytearray()
    buffer = 0
    bits = 0
    for digit in digits:
        buffer = ((buffer << 5) | digit) & 0xFFFF
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            if len(out) == size:
                break
    return bytes(out)


def decode_str(source: str, encoding: str = "utf-8") -> str:
    return decode(source).decode(encoding)
