# simgroup

Find groups of visually similar images under a directory tree. Every image file,
and every image inside a `.zip` archive, is reduced to a perceptual hash (pHash).
An image whose hash lies within a Hamming-distance threshold of another image's
hash goes into the same group. The groups are written out as JSON.

JPEG and PNG images can be read. Any file whose name does not end in `.zip` is
tried as an image. A file that cannot be decoded is reported on standard error
and then skipped. Zip member names are read as UTF-8 when they are flagged as
such or are valid UTF-8. All other member names are read as Shift_JIS.

## Installation

```
pip install .
```

## Usage

```
simgroup -root PATH/TO/PICTURES
```

Options (each long option may also be written with two dashes, e.g. `--root`,
except `-o` and `-j`):

| Option | Default | Meaning |
| --- | --- | --- |
| `-root` | (empty: current directory) | directory to search; a single file also works |
| `-write-midfile` | `midfile.json` | where to save the computed hashes (empty to skip) |
| `-read-midfile` | (empty) | load hashes from a saved file instead of scanning |
| `-o` | `similar_groups.json` | output file |
| `-j` | number of CPUs | worker threads for hashing |
| `-samplew` | `16` | pHash sample width |
| `-sampleh` | `16` | pHash sample height |
| `-threshold` | `10` | largest Hamming distance that still counts as similar |

`-samplew` times `-sampleh` is the number of bits in each hash and must be a
power of two.

The command prints how long reading and grouping took. Hashing a large
collection is slow, so the hashes are saved to the intermediate file. The file is
not written when no image was found. A later run can regroup with a different
threshold and skip the scan:

```
simgroup -read-midfile midfile.json -threshold 6 -o groups6.json
```

The output is a JSON list of groups. Each group lists the paths of the similar
images. The first image of each group, against which the others were compared,
comes last. Images that are not similar to any other image do not appear in the
output. For an image inside an archive, the path is the archive path joined with
the member name. If a directory cannot be listed, or a file cannot be read or
written, the command prints the error and exits with status 1.

## Library use

```python
from simgroup.readimage import read_image
from simgroup.phash import ext_perception_hash

a, _ = read_image("a.jpg")
b, _ = read_image("b.jpg")
distance = ext_perception_hash(a, 16, 16).distance(ext_perception_hash(b, 16, 16))
```

- `simgroup.readimage`: `read_image` and `decode_image` return the loaded image
  and its format name. Both raise `ImageDecodeError` on failure.
- `simgroup.phash`: `ext_perception_hash` returns an `ExtImageHash`. The hash
  offers `distance`, `to_string`, `ones_count`, `to_bytes` and
  `ExtImageHash.from_bytes`. Bad parameters, mismatched hashes and bad dumps
  raise `HashError`.
- `simgroup.hashinfo`: `ImageHashInfo` pairs a path with a hash.
  `dump_infos` and `load_infos` write and read a list of them as JSON. Each hash
  is stored as a base64 dump.
- `simgroup.container`: `ParallelCompList` holds `ImageHashInfo` records. It can
  be saved with `serialize` and loaded with `ParallelCompList.deserialize`. Each
  call to `group_similar_images` takes one group off the list.
- `simgroup.cli`: `collect_image_hashes` scans a tree. `read_images_from_zip`
  hashes the images in one archive. `group_all` repeats `group_similar_images`
  until the list is empty. `write_json` writes indented JSON.
- `simgroup.charcode`: `sjis_to_utf8` and `zip_member_name` handle archive member
  names.

## Tests

```
pip install .[test]
pytest
```