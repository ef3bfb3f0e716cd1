"""Prompt templates for Gemini vision calls.

Each template asks for a fixed output layout. The markers it requires are
module constants so the response validator checks exactly what the prompt
asked for.
"""

from models.schemas import AnalysisKind

SPECIES_NAME_MARKER = "**Nama Spesies**"
CONFIDENCE_MARKER = "**Confidence**"
CHARACTERISTICS_MARKER = "CIRI PEMBEDA:"
OVERALL_SCORE_MARKER = "**Skor Keseluruhan**"
CATEGORY_MARKER = "**Kategori**"
TABLE_HEADER_MARKER = "| Parameter |"
EYES_ROW_MARKER = "| **Mata** |"

CONSISTENCY_KEYWORDS: tuple[str, ...] = ("SNI 2729-2013", "Visual", "Non-Visual")

_CLOSING = "Analisis gambar berikut:"

SPECIES_FORMAT = f"""FORMAT OUTPUT WAJIB:
{SPECIES_NAME_MARKER}: [Nama dalam Bahasa Indonesia]
**Nama Ilmiah**: *[Nama Latin]*
**Famili**: [Nama famili]
{CONFIDENCE_MARKER}: [TINGGI/SEDANG/RENDAH]

{CHARACTERISTICS_MARKER}
- [Ciri spesifik 1]
- [Ciri spesifik 2]
- [Ciri spesifik 3]

DESKRIPSI:
[Satu paragraf deskripsi singkat tanpa format markdown]

ATURAN KONSISTENSI:
- Ikan terlihat jelas = CONFIDENCE: TINGGI
- Ada keraguan kecil = CONFIDENCE: SEDANG
- Sulit diidentifikasi = CONFIDENCE: RENDAH
- Gunakan nama Indonesia yang sama untuk spesies yang sama."""

FRESHNESS_FORMAT = f"""FORMAT OUTPUT WAJIB:
**Spesies**: [Nama ikan atau "Tidak teridentifikasi"]
{OVERALL_SCORE_MARKER}: [X.X]/9
{CATEGORY_MARKER}: [PRIMA/BAIK/SEDANG/BURUK]

PARAMETER SNI 2729-2013:
{TABLE_HEADER_MARKER} Kondisi | Skor | Status |
|-----------|---------|------|--------|
{EYES_ROW_MARKER} [Deskripsi] | [1-9] | Visual |
| **Insang** | [Deskripsi] | [1-9] | Visual |
| **Lendir** | [Deskripsi] | [1-9] | Visual |
| **Daging** | [Deskripsi] | [1-9] | Visual |
| **Tekstur** | [Deskripsi] | [1-9] | Visual |
| **Bau** | [Deskripsi] | [1-9] | Non-Visual |

ATURAN SKOR:
- Mata jernih, cembung = 9; agak keruh = 5-6; keruh, cekung = 1-3
- Insang merah cerah = 9; merah kusam = 5-6; coklat atau abu-abu = 1-3
- Lendir bening = 9; agak keruh = 5-6; kental, kekuningan = 1-3
- Daging dan tekstur elastis, kompak = 8-9; lembek = 1-3

KATEGORI FINAL:
- 8.5-9.0 = PRIMA
- 7.0-8.4 = BAIK
- 4.5-6.9 = SEDANG
- 1.0-4.4 = BURUK"""


def build_species_prompt() -> str:
    return f"""SISTEM IDENTIFIKASI SPESIES IKAN - MODE KONSISTEN

INSTRUKSI WAJIB:
1. Gunakan format output PERSIS seperti contoh.
2. Jangan memvariasikan kata atau struktur.
3. Gunakan tingkat confidence yang sama untuk kondisi gambar yang serupa.

{SPECIES_FORMAT}

{_CLOSING}"""


def build_freshness_prompt() -> str:
    return f"""SISTEM ANALISIS KESEGARAN IKAN - MODE KONSISTEN SNI 2729-2013

INSTRUKSI WAJIB:
1. Gunakan skala skor 1-9 yang SAMA untuk kondisi serupa.
2. Format output harus PERSIS sama di setiap analisis.
3. Parameter yang tidak dapat dinilai dari gambar ditandai Non-Visual.

{FRESHNESS_FORMAT}

{_CLOSING}"""


def build_combined_prompt() -> str:
    return f"""SISTEM ANALISIS GABUNGAN - MODE KONSISTEN

BAGIAN 1 - IDENTIFIKASI SPESIES:
{SPECIES_FORMAT}

BAGIAN 2 - ANALISIS KESEGARAN:
{FRESHNESS_FORMAT}

ATURAN KONSISTENSI GABUNGAN:
- Identifikasi spesies DULU, baru analisis kesegaran.
- Gunakan nama spesies yang sama di kedua bagian.

{_CLOSING}"""


_BUILDERS = {
    AnalysisKind.SPECIES: build_species_prompt,
    AnalysisKind.FRESHNESS: build_freshness_prompt,
    AnalysisKind.BOTH: build_combined_prompt,
}


def build_prompt(kind: AnalysisKind | str) -> str:
    """Prompt for the requested analysis kind; unknown kinds raise ``ValueError``."""
    return _BUILDERS[AnalysisKind(kind)]()
