from typing import Tuple
import warp as wp

LANCZOS_RADIUS = wp.constant(3.0)

@wp.func
def lanczos3(x: wp.float32) -> wp.float32:
    if x == 0.0:
        return 1.0
    if x <= -LANCZOS_RADIUS or x >= LANCZOS_RADIUS:
        return 0.0

    px = wp.pi * x
    return LANCZOS_RADIUS * wp.sin(px) * wp.sin(px / LANCZOS_RADIUS) / (px * px)

@wp.func
def filter_window(
    out_idx: wp.int32,
    in_size: wp.int32,
    scale: wp.float32,
) -> Tuple[wp.float32, wp.int32, wp.int32]:
    # sample center, first input index, one past the last input index
    filter_scale = wp.max(scale, 1.0)
    support = LANCZOS_RADIUS * filter_scale
    center = (wp.float32(out_idx) + 0.5) * scale

    i_min = wp.max(wp.int32(center - support + 0.5), 0)
    i_max = wp.min(wp.int32(center + support + 0.5), in_size)

    return center, i_min, i_max

# horizontal pass: src is (h, in_w, c), dst is (h, out_w, c)
@wp.kernel(enable_backward=False)
def resample_rows_kernel(
    src: wp.array3d(dtype=wp.float32),
    scale: wp.float32,
    dst: wp.array3d(dtype=wp.float32),
):
    y, x = wp.tid()

    center, i_min, i_max = filter_window(x, src.shape[1], scale)
    filter_scale = wp.max(scale, 1.0)

    for c in range(src.shape[2]):
        acc = wp.float32(0.0)
        norm = wp.float32(0.0)
        for i in range(i_min, i_max):
            w = lanczos3((wp.float32(i) - center + 0.5) / filter_scale)
            acc += w * src[y, i, c]
            norm += w
        if norm != 0.0:
            acc = acc / norm
        dst[y, x, c] = acc

# vertical pass: src is (in_h, w, c), dst is (out_h, w, c)
@wp.kernel(enable_backward=False)
def resample_columns_kernel(
    src: wp.array3d(dtype=wp.float32),
    scale: wp.float32,
    dst: wp.array3d(dtype=wp.float32),
):
    y, x = wp.tid()

    center, i_min, i_max = filter_window(y, src.shape[0], scale)
    filter_scale = wp.max(scale, 1.0)

    for c in range(src.shape[2]):
        acc = wp.float32(0.0)
        norm = wp.float32(0.0)
        for i in range(i_min, i_max):
            w = lanczos3((wp.float32(i) - center + 0.5) / filter_scale)
            acc += w * src[i, x, c]
            norm += w
        if norm != 0.0:
            acc = acc / norm
        dst[y, x, c] = acc
