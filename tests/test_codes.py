# tests/test_codes.py

import pytest

from app.utils.codes import HmacDigitCodeGenerator, Md5DigitCodeGenerator, get_code_generator


@pytest.mark.parametrize("generator", [Md5DigitCodeGenerator(), HmacDigitCodeGenerator("s3cret")])
def test_code_is_six_digits_and_deterministic(generator):
    code = generator.generate("42", "7", "13")
    assert len(code) == 6
    assert code.isdigit()
    assert generator.generate("42", "7", "13") == code


@pytest.mark.parametrize("generator", [Md5DigitCodeGenerator(), HmacDigitCodeGenerator("s3cret")])
def test_distinct_inputs_give_distinct_codes(generator):
    codes = {generator.generate("campaign-1", "user-2", str(i)) for i in range(50)}
    # Коллизии на 10^6 возможны, но на 50 значениях практически исключены
    assert len(codes) >= 49
    assert generator.generate("a", "b", "c") != generator.generate("a", "b", "d")


def test_md5_generator_matches_legacy_digit_harvest():
    # md5("") = d41d8cd98f00b204e9800998ecf8427e -> цифры 418980020498009988427
    assert Md5DigitCodeGenerator().generate("") == "418980"


def test_hmac_generator_depends_on_secret():
    first = HmacDigitCodeGenerator("secret-a").generate("1", "2")
    second = HmacDigitCodeGenerator("secret-b").generate("1", "2")
    assert first != second


def test_hmac_generator_requires_secret():
    with pytest.raises(ValueError):
        HmacDigitCodeGenerator("")


def test_custom_length():
    assert len(Md5DigitCodeGenerator(length=8).generate("x")) == 8


def test_default_strategy_follows_settings(mocker):
    mocker.patch("app.utils.codes.settings.CODE_HMAC_SECRET", None)
    assert isinstance(get_code_generator(), Md5DigitCodeGenerator)

    mocker.patch("app.utils.codes.settings.CODE_HMAC_SECRET", "top-secret")
    assert isinstance(get_code_generator(), HmacDigitCodeGenerator)
