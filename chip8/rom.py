import os

from . import config
from .errors import RomFormatError


HEX_EXTENSIONS = ('.hex', '.txt')


def read_hex(path):
    """read a text ROM made of whitespace separated hex bytes, usually one instruction (two bytes) per line"""
    program = bytearray()
    try:
        with open(path, mode='r', encoding='ascii') as f:
            lines = f.read().splitlines()
    except UnicodeDecodeError:
        raise RomFormatError(f"{path}: not a text hex ROM") from None
    for line_no, line in enumerate(lines, start=1):
        for token in line.split():
            if len(token) > 2:
                raise RomFormatError(f"{path}:{line_no}: '{token}' is not a byte")
            try:
                program.append(int(token, 16))
            except ValueError:
                raise RomFormatError(f"{path}:{line_no}: '{token}' is not a hex number") from None
    return bytes(program)


def read_binary(path):
    with open(path, mode='rb') as f:
        return f.read()


def read_rom(path):
    """load ROM file from user specified path, text hex dumps are told apart by their extension"""
    _, ext = os.path.splitext(path)
    rom = read_hex(path) if ext.lower() in HEX_EXTENSIONS else read_binary(path)
    if config.DEBUG: print(f"The ROM at path {path} has been read successfully ({len(rom)} bytes)")
    return rom
