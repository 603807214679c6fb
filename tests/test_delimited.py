from __future__ import annotations

import csv

import pytest

from scholarport.processing.delimited import decode_rows, encode_rows


def test_cells_with_delimiter_quote_or_newline_are_quoted() -> None:
    text = encode_rows([["plain", "a,b", 'say "hi"', "two\nlines", None]])

    assert text == 'plain,"a,b","say ""hi""","two\nlines",\n'


def test_decoder_reads_what_encoder_writes() -> None:
    rows = [["Name", "Notes"], ["Grant, Inc.", 'He said "apply"\nsoon']]

    assert decode_rows(encode_rows(rows)) == rows


def test_decoder_skips_blank_lines_and_bom() -> None:
    text = "\ufeffName,Amount\n\n  Grant , $100 \n,\n"

    assert decode_rows(text) == [["Name", "Amount"], ["Grant", "$100"]]


def test_decoder_rejects_stray_quote() -> None:
    with pytest.raises(csv.Error):
        decode_rows('"unterminated,value\nnext')
