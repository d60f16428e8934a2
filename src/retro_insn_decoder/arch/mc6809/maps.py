# src/retro_insn_decoder/arch/mc6809/maps.py
"""
MC6809 / MC6809E のオペコード表と、オペランド表示に使う固定表。
"""
from typing import List, Optional, Tuple

# Page 1。0x10/0x11 は Page 2/3 へのプレフィックスです。
OPCODES_6809: List[str] = [
    "NEG",  "?",    "?",    "COM",  "LSR",  "?",    "ROR",  "ASR",
    "ASL",  "ROL",  "DEC",  "?",    "INC",  "TST",  "JMP",  "CLR",
    "(pg2)", "(pg3)", "NOP",  "SYNC", "?",    "?",    "LBRA", "LBSR",
    "?",    "DAA",  "ORCC", "?",    "ANDCC", "SEX",  "EXG",  "TFR",
    "BRA",  "BRN",  "BHI",  "BLS",  "BCC",  "BCS",  "BNE",  "BEQ",
    "BVC",  "BVS",  "BPL",  "BMI",  "BGE",  "BLT",  "BGT",  "BLE",
    "LEAX", "LEAY", "LEAS", "LEAU", "PSHS", "PULS", "PSHU", "PULU",
    "?",    "RTS",  "ABX",  "RTI",  "CWAI", "MUL",  "?",    "SWI",
    "NEGA", "?",    "?",    "COMA", "LSRA", "?",    "RORA", "ASRA",
    "ASLA", "ROLA", "DECA", "?",    "INCA", "TSTA", "?",    "CLRA",
    "NEGB", "?",    "?",    "COMB", "LSRB", "?",    "RORB", "ASRB",
    "ASLB", "ROLB", "DECB", "?",    "INCB", "TSTB", "?",    "CLRB",
    "NEG",  "?",    "?",    "COM",  "LSR",  "?",    "ROR",  "ASR",
    "ASL",  "ROL",  "DEC",  "?",    "INC",  "TST",  "JMP",  "CLR",
    "NEG",  "?",    "?",    "COM",  "LSR",  "?",    "ROR",  "ASR",
    "ASL",  "ROL",  "DEC",  "?",    "INC",  "TST",  "JMP",  "CLR",
    "SUBA", "CMPA", "SBCA", "SUBD", "ANDA", "BITA", "LDA",  "?",
    "EORA", "ADCA", "ORA",  "ADDA", "CMPX", "BSR",  "LDX",  "?",
    "SUBA", "CMPA", "SBCA", "SUBD", "ANDA", "BITA", "LDA",  "STA",
    "EORA", "ADCA", "ORA",  "ADDA", "CMPX", "JSR",  "LDX",  "STX",
    "SUBA", "CMPA", "SBCA", "SUBD", "ANDA", "BITA", "LDA",  "STA",
    "EORA", "ADCA", "ORA",  "ADDA", "CMPX", "JSR",  "LDX",  "STX",
    "SUBA", "CMPA", "SBCA", "SUBD", "ANDA", "BITA", "LDA",  "STA",
    "EORA", "ADCA", "ORA",  "ADDA", "CMPX", "JSR",  "LDX",  "STX",
    "SUBB", "CMPB", "SBCB", "ADDD", "ANDB", "BITB", "LDB",  "?",
    "EORB", "ADCB", "ORB",  "ADDB", "LDD",  "?",    "LDU",  "?",
    "SUBB", "CMPB", "SBCB", "ADDD", "ANDB", "BITB", "LDB",  "STB",
    "EORB", "ADCB", "ORB",  "ADDB", "LDD",  "STD",  "LDU",  "STU",
    "SUBB", "CMPB", "SBCB", "ADDD", "ANDB", "BITB", "LDB",  "STB",
    "EORB", "ADCB", "ORB",  "ADDB", "LDD",  "STD",  "LDU",  "STU",
    "SUBB", "CMPB", "SBCB", "ADDD", "ANDB", "BITB", "LDB",  "STB",
    "EORB", "ADCB", "ORB",  "ADDB", "LDD",  "STD",  "LDU",  "STU",
]

# Page 2 の長条件分岐 (0x1020-0x102F)
OPCODES_LONG_COND_BRANCHES: List[str] = [
    "?",    "LBRN", "LBHI", "LBLS", "LBCC", "LBCS", "LBNE", "LBEQ",
    "LBVC", "LBVS", "LBPL", "LBMI", "LBGE", "LBLT", "LBGT", "LBLE",
]

# EXG/TFR のレジスタ番号（4ビット）に対応する名前
EXG_TFR_REGISTERS: List[str] = [
    "D", "X", "Y", "U", "S", "PC", "?", "?",
    "A", "B", "CCR", "DPR", "?", "?", "?", "?",
]

# インデックスポストバイトのビット6-5で選択されるレジスタ
INDEX_REGISTERS: List[str] = ["X", "Y", "U", "S"]

# PSH/PUL のレジスタマスク（ビット順）。None はスタックポインタの片割れ(U/S)。
PSH_PUL_REGISTERS: List[Tuple[int, Optional[str]]] = [
    (0b00000001, "CCR"),
    (0b00000010, "A"),
    (0b00000100, "B"),
    (0b00001000, "DPR"),
    (0b00010000, "X"),
    (0b00100000, "Y"),
    (0b01000000, None),
    (0b10000000, "PC"),
]
