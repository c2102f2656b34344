"""
Python implementation of the fdlibm routines behind JavaScript's Math.sin,
Math.cos, Math.atan2 and Math.exp.

The platform libm rounds some results differently in the last bit, which is
enough to move a crease endpoint or flip a weight threshold. These ports
follow fdlibm 5.3 operation for operation so every value matches the browser
renderer bit for bit.
"""

import math
import struct

TWO24 = 1.67772160000000000000e07
TWON24 = 5.96046447753906250000e-08


def _words(x):
    """High and low 32-bit words of a double, both unsigned."""
    bits = struct.unpack("<Q", struct.pack("<d", x))[0]
    return bits >> 32, bits & 0xFFFFFFFF


def _from_words(hi, lo):
    bits = ((hi & 0xFFFFFFFF) << 32) | (lo & 0xFFFFFFFF)
    return struct.unpack("<d", struct.pack("<Q", bits))[0]


def _high_word(x):
    return _words(x)[0]


# ------------------------------------------------------------------ atan

ATAN_HI = [
    4.63647609000806093515e-01,
    7.85398163397448278999e-01,
    9.82793723247329054082e-01,
    1.57079632679489655800e00,
]
ATAN_LO = [
    2.26987774529616870924e-17,
    3.06161699786838301793e-17,
    1.39033110312309984516e-17,
    6.12323399573676603587e-17,
]
AT = [
    3.33333333333329318027e-01,
    -1.99999999998764832476e-01,
    1.42857142725034663711e-01,
    -1.11111104054623557880e-01,
    9.09088713343650656196e-02,
    -7.69187620504482999495e-02,
    6.66107313738753120669e-02,
    -5.83357013379057348645e-02,
    4.97687799461593236017e-02,
    -3.65315727442169155270e-02,
    1.62858201153657823623e-02,
]

PI = 3.1415926535897931160e00
PI_O_2 = 1.5707963267948965580e00
PI_O_4 = 7.8539816339744827900e-01
PI_LO = 1.2246467991473531772e-16


def atan(x: float) -> float:
    hx = _high_word(x)
    negative = hx >> 31
    ix = hx & 0x7FFFFFFF

    if ix >= 0x44100000:  # |x| >= 2^66
        if math.isnan(x):
            return x + x
        if negative:
            return -ATAN_HI[3] - ATAN_LO[3]
        return ATAN_HI[3] + ATAN_LO[3]

    if ix < 0x3FDC0000:  # |x| < 0.4375
        if ix < 0x3E400000:
            return x
        index = -1
    else:
        x = abs(x)
        if ix < 0x3FF30000:  # |x| < 1.1875
            if ix < 0x3FE60000:
                index = 0
                x = (2.0 * x - 1.0) / (2.0 + x)
            else:
                index = 1
                x = (x - 1.0) / (x + 1.0)
        elif ix < 0x40038000:  # |x| < 2.4375
            index = 2
            x = (x - 1.5) / (1.0 + 1.5 * x)
        else:
            index = 3
            x = -1.0 / x

    z = x * x
    w = z * z
    s1 = z * (AT[0] + w * (AT[2] + w * (AT[4] + w * (AT[6] + w * (AT[8] + w * AT[10])))))
    s2 = w * (AT[1] + w * (AT[3] + w * (AT[5] + w * (AT[7] + w * AT[9]))))
    if index < 0:
        return x - x * (s1 + s2)

    z = ATAN_HI[index] - ((x * (s1 + s2) - ATAN_LO[index]) - x)
    return -z if negative else z


def atan2(y: float, x: float) -> float:
    """Angle of (x, y) in radians, in [-pi, pi]."""
    if math.isnan(x) or math.isnan(y):
        return x + y
    if x == 1.0:
        return atan(y)

    hx, lx = _words(x)
    hy, ly = _words(y)
    ix = hx & 0x7FFFFFFF
    iy = hy & 0x7FFFFFFF
    # 2 * sign(x) + sign(y)
    m = (hy >> 31) | ((hx >> 31) << 1)

    if (iy | ly) == 0:
        if m < 2:
            return y
        return PI if m == 2 else -PI

    if (ix | lx) == 0:
        return -PI_O_2 if hy >> 31 else PI_O_2

    if ix == 0x7FF00000:
        if iy == 0x7FF00000:
            return [PI_O_4, -PI_O_4, 3.0 * PI_O_4, -3.0 * PI_O_4][m]
        return [0.0, -0.0, PI, -PI][m]

    if iy == 0x7FF00000:
        return -PI_O_2 if hy >> 31 else PI_O_2

    k = (iy - ix) >> 20
    if k > 60:  # |y/x| > 2^60
        z = PI_O_2 + 0.5 * PI_LO
        m &= 1
    elif hx >> 31 and k < -60:
        z = 0.0
    else:
        z = atan(abs(y / x))

    if m == 0:
        return z
    if m == 1:
        return -z
    if m == 2:
        return PI - (z - PI_LO)
    return (z - PI_LO) - PI


# ---------------------------------------------------------- sin and cos

S1 = -1.66666666666666324348e-01
S2 = 8.33333333332248946124e-03
S3 = -1.98412698298579493134e-04
S4 = 2.75573137070700676789e-06
S5 = -2.50507602534068634195e-08
S6 = 1.58969099521155010221e-10

C1 = 4.16666666666666019037e-02
C2 = -1.38888888888741095749e-03
C3 = 2.48015872894767294178e-05
C4 = -2.75573143513906633035e-07
C5 = 2.08757232129817482790e-09
C6 = -1.13596475577881948265e-11

INV_PIO2 = 6.36619772367581382433e-01
PIO2_1 = 1.57079632673412561417e00
PIO2_1T = 6.07710050650619224932e-11
PIO2_2 = 6.07710050630396597660e-11
PIO2_2T = 2.02226624879595063154e-21
PIO2_3 = 2.02226624871116645580e-21
PIO2_3T = 8.47842766036889956997e-32

# High words of n * pi / 2 for n = 1..32
NPIO2_HW = [
    0x3FF921FB, 0x400921FB, 0x4012D97C, 0x401921FB, 0x401F6A7A, 0x4022D97C,
    0x4025FDBB, 0x402921FB, 0x402C463A, 0x402F6A7A, 0x4031475C, 0x4032D97C,
    0x40346B9C, 0x4035FDBB, 0x40378FDB, 0x403921FB, 0x403AB41B, 0x403C463A,
    0x403DD85A, 0x403F6A7A, 0x40407E4C, 0x4041475C, 0x4042106C, 0x4042D97C,
    0x4043A28C, 0x40446B9C, 0x404534AC, 0x4045FDBB, 0x4046C6CB, 0x40478FDB,
    0x404858EB, 0x404921FB,
]

# 2/pi in 24-bit chunks
TWO_OVER_PI = [
    0xA2F983, 0x6E4E44, 0x1529FC, 0x2757D1, 0xF534DD, 0xC0DB62, 0x95993C,
    0x439041, 0xFE5163, 0xABDEBB, 0xC561B7, 0x246E3A, 0x424DD2, 0xE00649,
    0x2EEA09, 0xD1921C, 0xFE1DEB, 0x1CB129, 0xA73EE8, 0x8235F5, 0x2EBB44,
    0x84E99C, 0x7026B4, 0x5F7E41, 0x3991D6, 0x398353, 0x39F49C, 0x845F8B,
    0xBDF928, 0x3B1FF8, 0x97FFDE, 0x05980F, 0xEF2F11, 0x8B5A0A, 0x6D1F6D,
    0x367ECF, 0x27CB09, 0xB74F46, 0x3F669E, 0x5FEA2D, 0x7527BA, 0xC7EBE5,
    0xF17B3D, 0x0739F7, 0x8A5292, 0xEA6BFB, 0x5FB11F, 0x8D5D08, 0x560330,
    0x46FC7B, 0x6BABF0, 0xCFBC20, 0x9AF436, 0x1DA9E3, 0x91615E, 0xE61B08,
    0x659985, 0x5F14A0, 0x68408D, 0xFFD880, 0x4D7327, 0x310606, 0x1556CA,
    0x73A8C9, 0x60E27B, 0xC08C6B,
]

PIO2_CHUNKS = [
    1.57079625129699707031e00,
    7.54978941586159635335e-08,
    5.39030252995776476554e-15,
    3.28200341580791294123e-22,
    1.27065575308067607349e-29,
    1.22933308981111328932e-36,
    2.73370053816464559624e-44,
    2.16741683877804819444e-51,
]


def _kernel_sin(x, y, iy):
    """sin on [-pi/4, pi/4]; y is the tail of x, used when iy is set."""
    ix = _high_word(x) & 0x7FFFFFFF
    if ix < 0x3E400000:  # |x| < 2^-27
        return x
    z = x * x
    v = z * x
    r = S2 + z * (S3 + z * (S4 + z * (S5 + z * S6)))
    if iy == 0:
        return x + v * (S1 + z * r)
    return x - ((z * (0.5 * y - v * r) - y) - v * S1)


def _kernel_cos(x, y):
    """cos on [-pi/4, pi/4]; y is the tail of x."""
    ix = _high_word(x) & 0x7FFFFFFF
    if ix < 0x3E400000:
        return 1.0
    z = x * x
    r = z * (C1 + z * (C2 + z * (C3 + z * (C4 + z * (C5 + z * C6)))))
    if ix < 0x3FD33333:  # |x| < 0.3
        return 1.0 - (0.5 * z - (z * r - x * y))
    if ix > 0x3FE90000:  # |x| > 0.78125
        qx = 0.28125
    else:
        qx = _from_words(ix - 0x00200000, 0)  # x/4
    iz = 0.5 * z - qx
    a = 1.0 - qx
    return a - (iz - (z * r - x * y))


def _kernel_rem_pio2(x, e0, nx):
    """Multi-precision reduction of huge arguments, returns (n & 7, y0, y1)."""
    jk = 4
    jp = jk
    jx = nx - 1
    jv = max(0, int((e0 - 3) / 24))
    q0 = e0 - 24 * (jv + 1)

    f = [0.0] * 20
    q = [0.0] * 20
    fq = [0.0] * 20
    iq = [0] * 20

    j = jv - jx
    for i in range(jx + jk + 1):
        f[i] = 0.0 if j < 0 else float(TWO_OVER_PI[j])
        j += 1

    for i in range(jk + 1):
        fw = 0.0
        for jj in range(jx + 1):
            fw += x[jj] * f[jx + i - jj]
        q[i] = fw

    jz = jk
    while True:
        # Distill q[] into iq[] in reverse
        z = q[jz]
        i = 0
        for jj in range(jz, 0, -1):
            fw = float(int(TWON24 * z))
            iq[i] = int(z - TWO24 * fw)
            z = q[jj - 1] + fw
            i += 1

        z = math.ldexp(z, q0)
        z -= 8.0 * math.floor(z * 0.125)
        n = int(z)
        z -= float(n)
        ih = 0
        if q0 > 0:
            i = iq[jz - 1] >> (24 - q0)
            n += i
            iq[jz - 1] -= i << (24 - q0)
            ih = iq[jz - 1] >> (23 - q0)
        elif q0 == 0:
            ih = iq[jz - 1] >> 23
        elif z >= 0.5:
            ih = 2

        if ih > 0:  # q > 0.5
            n += 1
            carry = 0
            for i in range(jz):
                value = iq[i]
                if carry == 0:
                    if value != 0:
                        carry = 1
                        iq[i] = 0x1000000 - value
                else:
                    iq[i] = 0xFFFFFF - value
            if q0 == 1:
                iq[jz - 1] &= 0x7FFFFF
            elif q0 == 2:
                iq[jz - 1] &= 0x3FFFFF
            if ih == 2:
                z = 1.0 - z
                if carry != 0:
                    z -= math.ldexp(1.0, q0)

        if z == 0.0:
            acc = 0
            for i in range(jz - 1, jk - 1, -1):
                acc |= iq[i]
            if acc == 0:
                # Not enough terms, pull in more of 2/pi
                k = 1
                while jk >= k and iq[jk - k] == 0:
                    k += 1
                for i in range(jz + 1, jz + k + 1):
                    f[jx + i] = float(TWO_OVER_PI[jv + i])
                    fw = 0.0
                    for jj in range(jx + 1):
                        fw += x[jj] * f[jx + i - jj]
                    q[i] = fw
                jz += k
                continue
        break

    if z == 0.0:
        jz -= 1
        q0 -= 24
        while iq[jz] == 0:
            jz -= 1
            q0 -= 24
    else:
        z = math.ldexp(z, -q0)
        if z >= TWO24:
            fw = float(int(TWON24 * z))
            iq[jz] = int(z - TWO24 * fw)
            jz += 1
            q0 += 24
            iq[jz] = int(fw)
        else:
            iq[jz] = int(z)

    fw = math.ldexp(1.0, q0)
    for i in range(jz, -1, -1):
        q[i] = fw * iq[i]
        fw *= TWON24

    for i in range(jz, -1, -1):
        fw = 0.0
        k = 0
        while k <= jp and k <= jz - i:
            fw += PIO2_CHUNKS[k] * q[i + k]
            k += 1
        fq[jz - i] = fw

    fw = 0.0
    for i in range(jz, -1, -1):
        fw += fq[i]
    y0 = fw if ih == 0 else -fw
    fw = fq[0] - fw
    for i in range(1, jz + 1):
        fw += fq[i]
    y1 = fw if ih == 0 else -fw
    return n & 7, y0, y1


def _rem_pio2(x):
    """Reduce x to y0 + y1 in [-pi/4, pi/4], returns (n, y0, y1) with x ~ n*pi/2 + y."""
    hx, lx = _words(x)
    negative = hx >> 31
    ix = hx & 0x7FFFFFFF

    if ix <= 0x3FE921FB:  # |x| <= pi/4
        return 0, x, 0.0

    if ix < 0x4002D97C:  # |x| < 3pi/4
        if not negative:
            z = x - PIO2_1
            if ix != 0x3FF921FB:
                y0 = z - PIO2_1T
                y1 = (z - y0) - PIO2_1T
            else:  # near pi/2
                z -= PIO2_2
                y0 = z - PIO2_2T
                y1 = (z - y0) - PIO2_2T
            return 1, y0, y1
        z = x + PIO2_1
        if ix != 0x3FF921FB:
            y0 = z + PIO2_1T
            y1 = (z - y0) + PIO2_1T
        else:
            z += PIO2_2
            y0 = z + PIO2_2T
            y1 = (z - y0) + PIO2_2T
        return -1, y0, y1

    if ix <= 0x413921FB:  # |x| <= 2^19 * pi/2
        t = abs(x)
        n = int(t * INV_PIO2 + 0.5)
        fn = float(n)
        r = t - fn * PIO2_1
        w = fn * PIO2_1T
        if n < 32 and ix != NPIO2_HW[n - 1]:
            y0 = r - w
        else:
            j = ix >> 20
            y0 = r - w
            i = j - ((_high_word(y0) >> 20) & 0x7FF)
            if i > 16:  # second iteration, good to 118 bits
                t = r
                w = fn * PIO2_2
                r = t - w
                w = fn * PIO2_2T - ((t - r) - w)
                y0 = r - w
                i = j - ((_high_word(y0) >> 20) & 0x7FF)
                if i > 49:  # third iteration, 151 bits
                    t = r
                    w = fn * PIO2_3
                    r = t - w
                    w = fn * PIO2_3T - ((t - r) - w)
                    y0 = r - w
        y1 = (r - y0) - w
        if negative:
            return -n, -y0, -y1
        return n, y0, y1

    # Split the mantissa into three 24-bit chunks scaled by 2^-e0
    e0 = (ix >> 20) - 1046
    z = _from_words(ix - (e0 << 20), lx)
    tx = [0.0, 0.0, 0.0]
    for i in range(2):
        tx[i] = float(int(z))
        z = (z - tx[i]) * TWO24
    tx[2] = z
    nx = 3
    while tx[nx - 1] == 0.0:
        nx -= 1

    n, y0, y1 = _kernel_rem_pio2(tx, e0, nx)
    if negative:
        return -n, -y0, -y1
    return n, y0, y1


def sin(x: float) -> float:
    ix = _high_word(x) & 0x7FFFFFFF
    if ix <= 0x3FE921FB:
        return _kernel_sin(x, 0.0, 0)
    if ix >= 0x7FF00000:
        return x - x

    n, y0, y1 = _rem_pio2(x)
    quadrant = n & 3
    if quadrant == 0:
        return _kernel_sin(y0, y1, 1)
    if quadrant == 1:
        return _kernel_cos(y0, y1)
    if quadrant == 2:
        return -_kernel_sin(y0, y1, 1)
    return -_kernel_cos(y0, y1)


def cos(x: float) -> float:
    ix = _high_word(x) & 0x7FFFFFFF
    if ix <= 0x3FE921FB:
        return _kernel_cos(x, 0.0)
    if ix >= 0x7FF00000:
        return x - x

    n, y0, y1 = _rem_pio2(x)
    quadrant = n & 3
    if quadrant == 0:
        return _kernel_cos(y0, y1)
    if quadrant == 1:
        return -_kernel_sin(y0, y1, 1)
    if quadrant == 2:
        return -_kernel_cos(y0, y1)
    return _kernel_sin(y0, y1, 1)


# ------------------------------------------------------------------ exp

LN2_HI = [6.93147180369123816490e-01, -6.93147180369123816490e-01]
LN2_LO = [1.90821492927058770002e-10, -1.90821492927058770002e-10]
HALF = [0.5, -0.5]
INV_LN2 = 1.44269504088896338700e00
P1 = 1.66666666666666019037e-01
P2 = -2.77777777770155933842e-03
P3 = 6.61375632143793436117e-05
P4 = -1.65339022054652515390e-06
P5 = 4.13813679705723846039e-08
E = 2.718281828459045
O_THRESHOLD = 7.09782712893383973096e02
U_THRESHOLD = -7.45133219101941108420e02
TWO_M1000 = 9.33263618503218878990e-302
TWO_1023 = 8.988465674311579539e307


def exp(x: float) -> float:
    hx, lx = _words(x)
    xsb = hx >> 31
    hx &= 0x7FFFFFFF

    if hx >= 0x40862E42:  # |x| >= 709.78
        if hx >= 0x7FF00000:
            if ((hx & 0xFFFFF) | lx) != 0:
                return x + x
            return x if xsb == 0 else 0.0
        if x > O_THRESHOLD:
            return math.inf
        if x < U_THRESHOLD:
            return 0.0

    hi = 0.0
    lo = 0.0
    k = 0
    if hx > 0x3FD62E42:  # |x| > 0.5 ln2
        if hx < 0x3FF0A2B2:  # |x| < 1.5 ln2
            if x == 1.0:
                return E
            hi = x - LN2_HI[xsb]
            lo = LN2_LO[xsb]
            k = 1 - xsb - xsb
        else:
            k = int(INV_LN2 * x + HALF[xsb])
            t = float(k)
            hi = x - t * LN2_HI[0]
            lo = t * LN2_LO[0]
        x = hi - lo
    elif hx < 0x3E300000:  # |x| < 2^-28
        return 1.0 + x

    t = x * x
    if k >= -1021:
        twopk = _from_words(0x3FF00000 + (k << 20), 0)
    else:
        twopk = _from_words(0x3FF00000 + ((k + 1000) << 20), 0)
    c = x - t * (P1 + t * (P2 + t * (P3 + t * (P4 + t * P5))))
    if k == 0:
        return 1.0 - ((x * c) / (c - 2.0) - x)

    y = 1.0 - ((lo - (x * c) / (2.0 - c)) - hi)
    if k >= -1021:
        if k == 1024:
            return y * 2.0 * TWO_1023
        return y * twopk
    return y * twopk * TWO_M1000
