import base64
import io
import json

import numpy as np
import pytest
from PIL import Image

from simgroup.hashinfo import ImageHashInfo, dump_infos, load_infos
from simgroup.phash import HashError, ext_perception_hash


def _info(seed, name):
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, size=(48, 48, 3), dtype=np.uint8)
    return ImageHashInfo(name, ext_perception_hash(Image.fromarray(data, "RGB"), 16, 16))


@pytest.fixture
def infos():
    return [
        _info(1, "samples/Cerberus_Front_Pres_01.jpg"),
        _info(2, "samples/sample1.jpg"),
    ]


def test_encode_decode_list(infos, tmp_path):
    path = tmp_path / "imagehash_temp.json"
    with path.open("w", encoding="utf-8") as stream:
        dump_infos(infos, stream)
    with path.open(encoding="utf-8") as stream:
        decoded = load_infos(stream)
    assert decoded == infos
    assert [d.image_hash.to_string() for d in decoded] == [i.image_hash.to_string() for i in infos]


def test_ones_count_survives_round_trip(infos):
    buffer = io.StringIO()
    dump_infos(infos, buffer)
    buffer.seek(0)
    decoded = load_infos(buffer)
    assert [d.image_hash.ones_count() for d in decoded] == [i.image_hash.ones_count() for i in infos]


def test_json_dict_fields(infos):
    entry = infos[0].to_json_dict()
    assert set(entry) == {"Filepath", "ImageHashDump"}
    assert entry["Filepath"] == "samples/Cerberus_Front_Pres_01.jpg"
    assert base64.b64decode(entry["ImageHashDump"]) == infos[0].image_hash.to_bytes()


def test_dump_is_indented_array(infos):
    buffer = io.StringIO()
    dump_infos(infos, buffer)
    text = buffer.getvalue()
    assert text.endswith("\n")
    assert text.startswith("[\n  {")
    assert len(json.loads(text)) == 2


def test_non_ascii_path_round_trip():
    info = _info(3, "写真/画像.png")
    assert ImageHashInfo.from_json_dict(info.to_json_dict()) == info


def test_null_loads_as_empty():
    assert load_infos(io.StringIO("null")) == []


def test_object_instead_of_array():
    with pytest.raises(HashError):
        load_infos(io.StringIO('{"Filepath": "a"}'))


def test_bad_base64():
    with pytest.raises(HashError):
        ImageHashInfo.from_json_dict({"Filepath": "a.jpg", "ImageHashDump": "!!notbase64"})


def test_missing_dump():
    with pytest.raises(HashError):
        ImageHashInfo.from_json_dict({"Filepath": "a.jpg"})


def test_wrong_field_type():
    with pytest.raises(HashError):
        ImageHashInfo.from_json_dict({"Filepath": 5, "ImageHashDump": ""})


def test_invalid_json():
    with pytest.raises(json.JSONDecodeError):
        load_infos(io.StringIO("[{"))