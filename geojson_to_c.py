#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
GeoJSON（MultiPolygon の Feature）→ C++ の MultiPolygon 組み立てコードを生成
- features[0].geometry.coordinates の各ポリゴンを { ... } ブロックで出力
- 各ポリゴンは外周リング（index 0）のみ。穴（index 1 以降）は無視
- 生成コードは stdout、ログ（[INFO]/[WARN]/[OK]/[ERR]）は stderr

使い方:
    python geojson_to_c.py area.geojson > area.h
"""

import json
import math
import sys
from decimal import Decimal
from pathlib import Path

from shapely.errors import ShapelyError
from shapely.geometry import Polygon
from shapely.validation import explain_validity

# ===== 設定（ここだけ編集）=========================================
MULTIPOLYGON_TYPE = "MultiPolygon"
POLYGON_TYPE      = "Polygon"
MULTIPOLYGON_VAR  = "mp"
POLYGON_VAR       = "p"
APPEND_FUNC       = "a"     # a(p, lon, lat) で頂点を追加する関数名

CHECK_VALIDITY = True   # 外周リングを shapely で検査して [WARN] を出す
VERBOSE        = True   # False: [INFO]/[OK] を抑制（[WARN] は常に出す）
# ================================================================


def load_geojson(path):
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


def multipolygon_coords(gj):
    """features[0] の MultiPolygon 座標（ポリゴン → リング → [lon, lat]）"""
    return gj["features"][0]["geometry"]["coordinates"]


def format_number(v) -> str:
    """JSON の数値を JavaScript の Number → 文字列変換と同じ表記にする"""
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise TypeError(f"not a number: {v!r}")
    if isinstance(v, int):
        if abs(v) <= 2**53:
            return str(v)
        v = float(v)  # JS と同じく倍精度に丸める
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    if v == 0:
        return "0"  # -0 も 0

    # repr は最短の往復表記。桁と指数を取り出して JS の規則で並べ直す
    sign, raw, exp = Decimal(repr(v)).as_tuple()
    n = exp + len(raw)  # 小数点の位置
    digits = "".join(map(str, raw)).rstrip("0")
    k = len(digits)
    prefix = "-" if sign else ""

    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * (-n) + digits
    e = n - 1
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    return f"{prefix}{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"


def emit_polygon(poly):
    """1 ポリゴン分のブロック（外周リングのみ）"""
    lines = ["{", f"{POLYGON_TYPE} {POLYGON_VAR};"]
    for coord in poly[0]:
        lon, lat = coord[0], coord[1]
        lines.append(
            f"{APPEND_FUNC}({POLYGON_VAR}, {format_number(lon)}, {format_number(lat)});"
        )
    lines.append(f"{MULTIPOLYGON_VAR}.push_back({POLYGON_VAR});")
    lines.append("}")
    return lines


def emit_multipolygon(coords):
    lines = [f"{MULTIPOLYGON_TYPE} {MULTIPOLYGON_VAR};"]
    for poly in coords:
        lines.extend(emit_polygon(poly))
    return lines


def generate(gj) -> str:
    return "\n".join(emit_multipolygon(multipolygon_coords(gj))) + "\n"


def ring_problem(ring):
    """外周リングが有効なポリゴンにならない理由（問題なければ None）"""
    try:
        poly = Polygon([(c[0], c[1]) for c in ring])
    except (ValueError, ShapelyError) as e:
        return str(e)
    if poly.is_valid:
        return None
    return explain_validity(poly)


def check_geometry(gj):
    """生成コードに反映されない内容を [WARN] で知らせる。返り値は警告の数"""
    warnings = 0
    feats = gj["features"]
    if len(feats) > 1:
        print(f"[WARN] features が {len(feats)} 件あります → 先頭のみ出力", file=sys.stderr)
        warnings += 1

    geom = feats[0]["geometry"]
    gtype = geom.get("type")
    if gtype is not None and gtype != "MultiPolygon":
        print(f"[WARN] geometry.type が '{gtype}' です（MultiPolygon を想定）", file=sys.stderr)
        warnings += 1

    for i, poly in enumerate(geom["coordinates"]):
        if len(poly) > 1:
            print(f"[WARN] polygon {i}: 穴 {len(poly) - 1} 個を無視します", file=sys.stderr)
            warnings += 1
        if CHECK_VALIDITY and poly:
            problem = ring_problem(poly[0])
            if problem:
                print(f"[WARN] polygon {i}: 外周リングが不正です: {problem}", file=sys.stderr)
                warnings += 1
    return warnings


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("[ERR] usage: geojson_to_c.py <input.geojson>", file=sys.stderr)
        sys.exit(2)

    in_file = Path(args[0])
    gj = load_geojson(in_file)
    coords = multipolygon_coords(gj)
    if VERBOSE:
        n_pts = sum(len(poly[0]) for poly in coords if poly)
        print(f"[INFO] {in_file.name}: polygons={len(coords)} points={n_pts}", file=sys.stderr)

    check_geometry(gj)
    sys.stdout.write(generate(gj))

    if VERBOSE:
        print(f"[OK] {len(coords)} ブロックを出力しました", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
