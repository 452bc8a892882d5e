# type: ignore
import pytest
from click.testing import CliRunner

from enaa.sasm.asm import assemble
from enaa.runtime.programs import DECRYPTER


@pytest.fixture
def decrypter_code():
    yield assemble(DECRYPTER)


@pytest.fixture
def runner():
    yield CliRunner()


@pytest.fixture
def cipher_file(tmp_path):
    path = tmp_path / 'cipher.txt'
    path.write_text('wontubqirniy', encoding='utf-8')
    yield path
