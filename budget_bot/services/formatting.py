from __future__ import annotations

from datetime import date

from budget_bot.services.parsing import CATEGORY_LIST

GENERIC_ERROR_REPLY = "❌ Terjadi kesalahan. Coba lagi nanti."

HELP_MESSAGE = """
📱 *Budget Tracker Bot*

*Akun:*
• `!login <email>` - Login
• `!logout` - Logout
• `!alert on|off` - Nyalakan/matikan peringatan budget

*Catat Transaksi:*
• "Makan 25k" (auto kategori)
• "Kado 50k #7" (manual: #7 = Lainnya)
• "Kopi 20k, roti 15k" (beberapa sekaligus)
• `!undo` - Batalkan transaksi terakhir
• `!hapus <nomor>` - Hapus transaksi hari ini

*Laporan:*
• "Sisa budget?" / "Total pengeluaran"
• `!hari` - Transaksi hari ini
• `!minggu` - Ringkasan 7 hari
• `!banding` - Bandingkan dengan bulan lalu
• `!prediksi` - Prediksi akhir periode
• `!rekap` - Rekap lengkap + file Excel
• `!kategori` - Daftar kategori

*Pengingat:*
• `!ingat <nama> <tanggal>` - Tambah pengingat bulanan
• `!pengingat` - Lihat pengingat
• `!hapusingat <nomor>` - Hapus pengingat

*Seru-seruan:*
• `!tantangan` `!sehat` `!mood` `!tips`
""".strip()

TIPS = [
    "Pakai aturan 50/30/20: 50% kebutuhan, 30% keinginan, 20% tabungan.",
    "Tunggu 24 jam sebelum membeli barang yang bukan kebutuhan.",
    "Catat pengeluaran kecil juga, jajan receh kalau dikumpulkan bisa besar.",
    "Sisihkan tabungan di awal bulan, bukan dari sisa di akhir bulan.",
    "Bandingkan harga di beberapa toko sebelum belanja bulanan.",
    "Matikan notifikasi promo e-commerce supaya tidak tergoda checkout.",
    "Bawa botol minum sendiri, hemat beli air kemasan setiap hari.",
    "Tinjau langganan streaming tiap bulan, hentikan yang jarang ditonton.",
    "Siapkan dana darurat minimal 3 kali pengeluaran bulanan.",
    "Belanja dengan daftar dan jangan ke supermarket saat lapar.",
]


def format_currency(amount: float, currency: str = "IDR") -> str:
    prefix = "Rp" if currency.upper() == "IDR" else f"{currency.upper()} "
    value = float(amount)
    sign = "-" if value < 0 else ""
    formatted = f"{abs(value):,.0f}".replace(",", ".")
    return f"{sign}{prefix}{formatted}"


def format_date(value: date) -> str:
    return value.isoformat()


def build_progress_bar(percent: float) -> str:
    total_blocks = 10
    capped = max(0.0, min(percent or 0.0, 100.0))
    filled = int(round((capped / 100.0) * total_blocks))
    filled = max(0, min(filled, total_blocks))
    bar = "█" * filled + "░" * (total_blocks - filled)
    return f"[{bar}] {capped:.0f}%"


def format_category_list() -> str:
    lines = ["*📁 Daftar Kategori*", ""]
    for idx, category in enumerate(CATEGORY_LIST, start=1):
        lines.append(f"*#{idx}* {category}")
    lines.append("")
    lines.append("_Gunakan #nomor untuk pilih kategori manual_")
    lines.append('_Contoh: "Beli kado 100k #7"_')
    return "\n".join(lines)


def percent_change(current: float, previous: float) -> float | None:
    if previous <= 0:
        return None
    return (current - previous) / previous * 100
