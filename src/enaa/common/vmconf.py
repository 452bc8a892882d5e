
WORD_BITS        = 32
WORD_MASK        = (1 << WORD_BITS) - 1
BYTE_MASK        = 0xFF

MAX_CODE_SIZE    = BYTE_MASK + 1    # Jump operands are single bytes

END_OF_INPUT     = 0                # Pushed by In once the input is exhausted
MAX_CODE_POINT   = 0x10FFFF
SURROGATES       = range(0xD800, 0xE000)

DEFAULT_SHIFT    = 4                # Initial shift of the built-in decrypter
ALPHABET_SIZE    = 26
