from __future__ import annotations

from django import forms

from .records import Quote


class ImportFileForm(forms.Form):
    file = forms.FileField(
        label="ملف CSV أو JSON",
        widget=forms.ClearableFileInput(attrs={'accept': '.csv,.json'}),
    )


class ManualQuoteForm(forms.Form):
    text = forms.CharField(
        label="إضافة اقتباس يدويًا",
        widget=forms.Textarea(attrs={'rows': 3, 'placeholder': "أدخل نص الاقتباس بالعربية"}),
    )
    author = forms.CharField(
        required=False,
        label="المؤلف",
        widget=forms.TextInput(attrs={'placeholder': "المؤلف (اختياري)"}),
    )

    def to_quote(self) -> Quote | None:
        return Quote.coerce(self.cleaned_data.get('text'), self.cleaned_data.get('author'))


class PosterForm(forms.Form):
    text = forms.CharField(widget=forms.HiddenInput)
    author = forms.CharField(required=False, widget=forms.HiddenInput)

    def to_quote(self) -> Quote | None:
        return Quote.coerce(self.cleaned_data.get('text'), self.cleaned_data.get('author'))
