"""
Built-in tax knowledge used by the demo responder.

Entries are matched in definition order, so the order below is significant.
"""

from typing import Dict, Tuple

from pydantic import BaseModel

from models.schemas import Citation


class KnowledgeEntry(BaseModel):
    answer: str
    citation: Citation
    keywords: Tuple[str, ...]

    class Config:
        frozen = True


KNOWLEDGE_BASE: Dict[str, KnowledgeEntry] = {
    # --- VAT ---
    "vat rate": KnowledgeEntry(
        answer=(
            "The standard VAT rate in Ghana is 15% (comprising 12.5% VAT and 2.5% NHIL/GETFund levies). "
            "This applies to most goods and services unless specifically exempted or zero-rated."
        ),
        citation=Citation(
            document="Value Added Tax Act, 2013 (Act 870)",
            section="Section 3",
            excerpt=(
                "There is imposed a tax to be known as value added tax on the supply of goods and services "
                "and the importation of goods at the rate of twelve and a half percent of the value of the "
                "supply or importation."
            ),
            page=5,
        ),
        keywords=("vat", "rate", "percent", "15", "12.5", "tax rate"),
    ),
    "vat registration": KnowledgeEntry(
        answer=(
            "You must register for VAT if your annual taxable turnover exceeds GH₵200,000. "
            "You can also voluntarily register if your turnover is below this threshold. "
            "Registration can be done at any GRA office or online at the GRA portal."
        ),
        citation=Citation(
            document="Value Added Tax Act, 2013 (Act 870)",
            section="Section 6(1)",
            excerpt=(
                "A person who makes taxable supplies and whose taxable turnover during any period of twelve "
                "months exceeds the threshold is required to apply for registration."
            ),
            page=8,
        ),
        keywords=("register", "registration", "vat", "threshold", "200000", "turnover"),
    ),
    "food exempt": KnowledgeEntry(
        answer=(
            "Yes, basic food items are exempt from VAT! This includes unprocessed cereals (rice, maize, millet), "
            "tubers (yam, cassava, cocoyam), fresh fruits and vegetables, and fresh fish. "
            "However, processed or packaged foods may be subject to VAT."
        ),
        citation=Citation(
            document="Value Added Tax Act, 2013 (Act 870)",
            section="First Schedule - Exempt Supplies",
            excerpt=(
                "The following supplies of goods are exempt from VAT: (a) agricultural products in their raw "
                "state including cereals, tubers, fruits, vegetables, groundnuts, and palm produce..."
            ),
            page=42,
        ),
        keywords=("food", "exempt", "exemption", "rice", "yam", "fish", "vegetables"),
    ),
    "export vat": KnowledgeEntry(
        answer=(
            "Great news for exporters! Exported goods, including cocoa, are zero-rated for VAT purposes. "
            "This means you don't charge VAT on exports, but you can still claim input VAT credits "
            "on your business expenses."
        ),
        citation=Citation(
            document="Value Added Tax Act, 2013 (Act 870)",
            section="Section 15(1)(a)",
            excerpt="The following supplies of goods or services are zero-rated: (a) the export of goods or services;",
            page=12,
        ),
        keywords=("export", "zero", "rated", "cocoa", "goods"),
    ),
    # --- E-Levy ---
    "e-levy": KnowledgeEntry(
        answer=(
            "E-Levy (Electronic Transfer Levy) is a tax on electronic transactions in Ghana. "
            "The current rate is 1% on transfers above GH₵100 per day. It applies to mobile money transfers, "
            "bank transfers, and other electronic payments."
        ),
        citation=Citation(
            document="Electronic Transfer Levy Act, 2022 (Act 1075)",
            section="Section 1",
            excerpt=(
                "There is imposed on the transfer of money by electronic means a levy to be known as the "
                "Electronic Transfer Levy."
            ),
            page=1,
        ),
        keywords=("e-levy", "elevy", "electronic", "transfer", "levy", "mobile money"),
    ),
    "e-levy rate": KnowledgeEntry(
        answer=(
            "The E-Levy rate is currently 1% on electronic transfers above GH₵100 per day. "
            "Transfers of GH₵100 or below per day are exempt from the levy."
        ),
        citation=Citation(
            document="Electronic Transfer Levy Act, 2022 (Act 1075) as amended",
            section="Section 2",
            excerpt=(
                "The rate of the levy imposed under section 1 is one percent of the value of the electronic "
                "transfer above the threshold."
            ),
            page=2,
        ),
        keywords=("e-levy", "rate", "percent", "1%", "momo", "mobile"),
    ),
    "e-levy exempt": KnowledgeEntry(
        answer=(
            "Several transfers are exempt from E-Levy:\n"
            "• Transfers of GH₵100 or less per day\n"
            "• Cumulative transfers up to GH₵100 daily\n"
            "• Transfers for payment of taxes\n"
            "• Transfers between accounts of the same person\n"
            "• Transfers for payment of social security contributions"
        ),
        citation=Citation(
            document="Electronic Transfer Levy Act, 2022 (Act 1075)",
            section="Section 4",
            excerpt=(
                "The following electronic transfers are exempt from the levy: (a) transfers of one hundred "
                "Ghana cedis or less per day..."
            ),
            page=3,
        ),
        keywords=("e-levy", "exempt", "exemption", "free"),
    ),
    # --- Income tax ---
    "income tax bands": KnowledgeEntry(
        answer=(
            "Ghana uses a graduated income tax system:\n"
            "• First GH₵4,380: 0%\n"
            "• Next GH₵1,320: 5%\n"
            "• Next GH₵1,560: 10%\n"
            "• Next GH₵36,000: 17.5%\n"
            "• Next GH₵196,740: 25%\n"
            "• Above GH₵240,000: 30%\n\n"
            "These are annual figures. Monthly PAYE is calculated proportionally."
        ),
        citation=Citation(
            document="Income Tax Act, 2015 (Act 896) - First Schedule",
            section="First Schedule - Tax Rates",
            excerpt="The rates of income tax for resident individuals are as specified in the table...",
            page=89,
        ),
        keywords=("income", "tax", "bands", "rates", "paye", "salary"),
    ),
    "file returns": KnowledgeEntry(
        answer=(
            "Annual tax returns must be filed by April 30th each year for the previous tax year. You can file:\n"
            "• Online via the GRA Taxpayer Portal (taxpayersportal.com)\n"
            "• At any GRA office\n"
            "• Through a registered tax agent\n\n"
            "Late filing attracts penalties, so file on time!"
        ),
        citation=Citation(
            document="Income Tax Act, 2015 (Act 896)",
            section="Section 124",
            excerpt=(
                "A person who is required to file a return shall file the return not later than four months "
                "after the end of the basis period."
            ),
            page=78,
        ),
        keywords=("file", "returns", "annual", "deadline", "april"),
    ),
    # --- Registration ---
    "tin": KnowledgeEntry(
        answer=(
            "A TIN (Taxpayer Identification Number) is a unique 11-digit number that identifies you for all "
            "tax purposes in Ghana. To get a TIN:\n\n"
            "1. Visit any GRA office or go online\n"
            "2. Complete the TIN registration form\n"
            "3. Provide: Ghana Card/Passport, proof of residence\n"
            "4. For businesses: add certificate of registration\n\n"
            "It's FREE and takes about 2-3 working days!"
        ),
        citation=Citation(
            document="Revenue Administration Act, 2016 (Act 915)",
            section="Section 10",
            excerpt=(
                "The Commissioner-General shall assign a taxpayer identification number to each person who is "
                "required to file a return or pay tax."
            ),
            page=12,
        ),
        keywords=("tin", "taxpayer", "identification", "number", "register"),
    ),
    "business registration": KnowledgeEntry(
        answer=(
            "To register your business with GRA, you'll need:\n\n"
            "1. Certificate of Incorporation/Registration from Registrar General\n"
            "2. TIN of the business and directors\n"
            "3. Business commencement form\n"
            "4. Bank details\n"
            "5. Ghana Card of directors/owners\n"
            "6. Proof of business location\n\n"
            "Visit any GRA office or register online at gra.gov.gh"
        ),
        citation=Citation(
            document="Revenue Administration Act, 2016 (Act 915)",
            section="Section 15",
            excerpt=(
                "A person required to pay tax shall register with the Commissioner-General within the time "
                "and in the manner prescribed."
            ),
            page=15,
        ),
        keywords=("business", "register", "registration", "documents", "company"),
    ),
}
