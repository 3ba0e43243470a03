from collections import namedtuple


# an opcode split into its operand fields, tagged with the family it belongs to
# pattern is the opcode with every operand nibble zeroed (0x8004 for 8xy4, 0xD000 for Dxyn, ...)
Instruction = namedtuple('Instruction', 'pattern opcode x y n nn nnn')

# WATCH OUT: masks order is important!!!
# the first mask whose masked opcode is a known pattern wins
MASKS = (
    (0xFFFF, (0x00E0, 0x00EE)),
    (0xF0FF, (0xE09E, 0xE0A1, 0xF007, 0xF00A, 0xF015, 0xF018, 0xF01E, 0xF029, 0xF033, 0xF055, 0xF065)),
    (0xF00F, (0x5000, 0x8000, 0x8001, 0x8002, 0x8003, 0x8004, 0x8005, 0x8006, 0x8007, 0x800E, 0x9000)),
    (0xF000, (0x1000, 0x2000, 0x3000, 0x4000, 0x6000, 0x7000, 0xA000, 0xB000, 0xC000, 0xD000)),
)

MNEMONICS = {
    0x00E0: "CLS",
    0x00EE: "RET",
    0x1000: "JP 0x{nnn:03x}",
    0x2000: "CALL 0x{nnn:03x}",
    0x3000: "SE V{x:X}, {nn}",
    0x4000: "SNE V{x:X}, {nn}",
    0x5000: "SE V{x:X}, V{y:X}",
    0x6000: "LD V{x:X}, {nn}",
    0x7000: "ADD V{x:X}, {nn}",
    0x8000: "LD V{x:X}, V{y:X}",
    0x8001: "OR V{x:X}, V{y:X}",
    0x8002: "AND V{x:X}, V{y:X}",
    0x8003: "XOR V{x:X}, V{y:X}",
    0x8004: "ADD V{x:X}, V{y:X}",
    0x8005: "SUB V{x:X}, V{y:X}",
    0x8006: "SHR V{x:X}, V{y:X}",
    0x8007: "SUBN V{x:X}, V{y:X}",
    0x800E: "SHL V{x:X}, V{y:X}",
    0x9000: "SNE V{x:X}, V{y:X}",
    0xA000: "LD I, 0x{nnn:03x}",
    0xB000: "JP V0, 0x{nnn:03x}",
    0xC000: "RND V{x:X}, 0x{nn:02x}",
    0xD000: "DRW V{x:X}, V{y:X}, {n}",
    0xE09E: "SKP V{x:X}",
    0xE0A1: "SKNP V{x:X}",
    0xF007: "LD V{x:X}, DT",
    0xF00A: "LD V{x:X}, K",
    0xF015: "LD DT, V{x:X}",
    0xF018: "LD ST, V{x:X}",
    0xF01E: "ADD I, V{x:X}",
    0xF029: "LD F, V{x:X}",
    0xF033: "LD B, V{x:X}",
    0xF055: "LD [I], V{x:X}",
    0xF065: "LD V{x:X}, [I]",
}


def decode(opcode):
    """decode an opcode using masks and return the matching Instruction, None if the opcode is unknown"""
    for mask, patterns in MASKS:
        if (opcode & mask) in patterns:
            return Instruction(
                pattern=opcode & mask,
                opcode=opcode,
                x=(opcode & 0x0F00) >> 8,
                y=(opcode & 0x00F0) >> 4,
                n=opcode & 0x000F,
                nn=opcode & 0x00FF,
                nnn=opcode & 0x0FFF,
            )
    return None


def disassemble(opcode):
    instruction = decode(opcode)
    if instruction is None:
        return f"???? 0x{opcode:04x}"
    return MNEMONICS[instruction.pattern].format(**instruction._asdict())
