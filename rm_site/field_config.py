"""
レコード正規化・分類の設定

researchmap の業績レコードは版や入力経路によってフィールド名が揺れる。
同じ概念を表すフィールドを優先順位順に並べておき、新しい揺れが見つかったら
該当する一覧に 1 行追加する。

各要素はキー名、ネストしたキーのタプル、または item を受け取る関数。
"""

# 題目（優先順位順）
TITLE_FIELDS = (
    'paper_title',
    'presentation_title',
    'title',
    'published_paper_title',
    ('published_paper', 'title'),
    'article_title',
    'name',
    'rm:title',
    'dc:title',
    'dcterms:title',
)

# 掲載誌・会議名
VENUE_FIELDS = (
    'publication_name',
    'journal',
    'journal_name',
    'published_paper_name',
    'container_title',
    'event',
    'source',
    'rm:journal',
    'prism:publicationName',
)

# 年（日付文字列からは 19xx/20xx を拾う）
YEAR_FIELDS = (
    'year',
    'published_year',
    'publication_year',
    'rm:year',
    ('date', 'year'),
    ('issued', 'year'),
    'publication_date',
    'published_date',
    'from_event_date',
    'date',
    'issued',
)

# 並べ替え用の日付
DATE_FIELDS = (
    'publication_date',
    'published_date',
    'from_event_date',
    'date',
)

VOLUME_FIELDS = ('volume', 'journal_volume', 'vol', 'prism:volume')
ISSUE_FIELDS = ('number', 'issue', 'no', 'journal_number', 'prism:number')
START_PAGE_FIELDS = ('starting_page', 'start_page', 'page_start', 'first_page', 'prism:startingPage')
END_PAGE_FIELDS = ('ending_page', 'end_page', 'page_end', 'last_page', 'prism:endingPage')
PAGE_RANGE_FIELDS = ('pages', 'page', 'page_range', 'pagination', 'prism:pageRange')

# 著者・発表者（最初に名前が取れたフィールドを使う）
AUTHOR_FIELDS = (
    'authors',
    'author',
    'creators',
    'contributors',
    'members',
    'presenters',
    'speakers',
    'dc:creator',
    'rm:authors',
    'rm:presenters',
)

# 人名 dict の姓・名
GIVEN_NAME_FIELDS = ('given_name', 'first_name', 'given')
FAMILY_NAME_FIELDS = ('family_name', 'last_name', 'surname', 'family')

# DOI を直接持つフィールド
DOI_FIELDS = ('doi', 'DOI', 'rm:doi', 'prism:doi', ('identifier', 'doi'))
# DOI が無いときのリンク
URL_FIELDS = ('url', 'URL', 'link', 'rm:url')

# レコード ID
ID_FIELDS = ('rm:id', 'id', '@id')

# 記述言語
LANGUAGE_FIELDS = ('languages', 'language', 'rm:languages')
JAPANESE_LANGUAGE_CODES = ('jpn', 'ja', 'japanese')

# 分類に使うフィールド
PAPER_TYPE_FIELDS = ('published_paper_type', 'paper_type', 'type', 'rm:published_paper_type')
PRESENTATION_TYPE_FIELDS = ('presentation_type', 'type')
REFEREE_FIELDS = ('referee', 'refereed', 'is_refereed', 'peer_reviewed', '査読')
INVITED_FIELDS = ('invited', 'is_invited', '招待')
INTERNATIONAL_JOURNAL_FIELDS = ('is_international_journal',)
INTERNATIONAL_EVENT_FIELDS = (
    'is_international_presentation',
    'is_international_conference',
    'is_international',
    'international',
)
# 招待講演の語を探す自由記述フィールド
FREE_TEXT_FIELDS = ('presentation_title', 'title', 'event', 'description', 'note', 'rm:note')

# 会議録を示す語（部分一致、大文字小文字無視）
CONFERENCE_PATTERNS = (
    'conference',
    'proceedings',
    'symposium',
    'workshop',
    'congress',
    'meeting',
    '国際会議',
    '会議録',
    '予稿集',
    '講演論文集',
    'シンポジウム',
    'ワークショップ',
)
INTERNATIONAL_PATTERNS = ('international', '国際')

# レコード種別（取得エンドポイント名）
PAPER_KIND = 'published_papers'
PRESENTATION_KIND = 'presentations'
