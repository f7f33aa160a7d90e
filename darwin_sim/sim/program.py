# darwin_sim/sim/program.py
"""
Species program parser.

Source layout:
  line 1            species name (taken verbatim, whatever it contains)
  blank / '#...'    skipped
  'name:'           LABEL instruction at the next address
  'op'              zero-operand instruction
  'op label'        instruction with a label operand

Every instruction, labels included, gets the next sequential address.
"""
from __future__ import annotations
from typing import Dict, List, Sequence, Tuple

from .errors import MalformedProgramError
from .models import Color, Instruction, Opcode, Program, Species

NEEDS_LABEL = frozenset({
    Opcode.GO, Opcode.IFEMPTY, Opcode.IFWALL, Opcode.IFSAME, Opcode.IFENEMY, Opcode.IFRANDOM,
})
OPTIONAL_LABEL = frozenset({Opcode.INFECT})


def _parse_line(line: str, lineno: int) -> Instruction:
    tokens = line.split()
    head = tokens[0]

    if head.endswith(":"):
        name = head[:-1]
        if not name:
            raise MalformedProgramError(f"line {lineno}: empty label name")
        if len(tokens) > 1:
            raise MalformedProgramError(f"line {lineno}: unexpected text after label '{head}'")
        return Instruction(Opcode.LABEL, name)

    if len(tokens) > 2:
        raise MalformedProgramError(f"line {lineno}: too many tokens in '{line.strip()}'")

    try:
        op = Opcode.from_token(head)
    except MalformedProgramError as e:
        raise MalformedProgramError(f"line {lineno}: {e}") from None
    if op is Opcode.LABEL:
        raise MalformedProgramError(f"line {lineno}: labels are written as 'name:'")

    label = tokens[1] if len(tokens) == 2 else None
    if label is None and op in NEEDS_LABEL:
        raise MalformedProgramError(f"line {lineno}: '{head}' needs a label")
    if label is not None and op not in NEEDS_LABEL and op not in OPTIONAL_LABEL:
        raise MalformedProgramError(f"line {lineno}: '{head}' takes no label")
    return Instruction(op, label)


def _label_table(instructions: Sequence[Instruction]) -> Dict[str, int]:
    table: Dict[str, int] = {}
    for addr, ins in enumerate(instructions):
        if ins.opcode is not Opcode.LABEL:
            continue
        if ins.label in table:
            raise MalformedProgramError(
                f"label '{ins.label}' defined twice (addresses {table[ins.label]} and {addr})"
            )
        table[ins.label] = addr
    return table


def parse(source: str) -> Tuple[str, Program]:
    """Return (species name, program). Raises MalformedProgramError."""
    lines = source.splitlines()
    if not lines:
        raise MalformedProgramError("empty species source")

    name = lines[0]
    instructions: List[Instruction] = []
    for lineno, line in enumerate(lines[1:], start=2):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        instructions.append(_parse_line(stripped, lineno))

    if not instructions:
        raise MalformedProgramError(f"species '{name}' has no instructions")

    labels = _label_table(instructions)
    for addr, ins in enumerate(instructions):
        if ins.opcode is not Opcode.LABEL and ins.label is not None and ins.label not in labels:
            raise MalformedProgramError(f"address {addr}: '{ins}' jumps to undefined label '{ins.label}'")

    return name, Program(instructions=tuple(instructions), labels=labels)


def species_from_source(source: str, color: Color) -> Species:
    name, program = parse(source)
    return Species(name=name, color=color, program=program)


def load_species(path: str, color: Color) -> Species:
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedProgramError(f"cannot read species file '{path}': {e}") from e
    return species_from_source(source, color)
