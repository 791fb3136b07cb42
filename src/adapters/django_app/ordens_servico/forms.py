"""
Django Forms para validação de entrada.

Forms são DRIVING ADAPTERS que validam dados antes de
passar para os Use Cases.

Responsabilidades:
- Validação estrutural (campos obrigatórios, tamanhos, arquivos)
- Sanitização de entrada
- Mensagens de erro amigáveis

Opções que dependem de cadastro (setores, técnicos) são recebidas
pelo construtor; forms não consultam o banco.
"""

from django import forms
from django.conf import settings
from django.contrib.auth.forms import UserCreationForm
from django.core.validators import FileExtensionValidator

from .models import (
    CategoryChoices,
    MaintenanceTypeChoices,
    PriorityChoices,
    RoleChoices,
    StatusChoices,
)

EXTENSOES_IMAGEM = ['jpg', 'jpeg', 'png', 'gif', 'webp']

MENSAGEM_IMAGEM_INVALIDA = 'O arquivo deve ser uma imagem válida'

TODOS = ('all', 'Todos')

PERIODOS_ANALISE = [
    ('7', 'Últimos 7 dias'),
    ('30', 'Últimos 30 dias'),
    ('90', 'Últimos 90 dias'),
    ('365', 'Último ano'),
    ('0', 'Todo o período'),
]


def _opcoes(itens, vazio=None):
    """Converte DTOs com id/nome (ou usuario_id/nome_completo) em choices."""
    opcoes = [vazio] if vazio else []
    for item in itens or []:
        chave = getattr(item, 'id', None) or getattr(item, 'usuario_id')
        nome = getattr(item, 'nome', None) or getattr(item, 'nome_completo')
        opcoes.append((chave, nome))
    return opcoes


def _validar_tamanho(arquivo, max_mb=None):
    """O conteúdo já foi verificado pelo ImageField (Pillow); aqui só o limite em MB."""
    if not arquivo:
        return arquivo

    max_mb = max_mb or settings.FOTO_MAX_MB
    if arquivo.size > max_mb * 1024 * 1024:
        raise forms.ValidationError(f'A imagem deve ter no máximo {max_mb} MB')
    return arquivo


def _select(**attrs):
    return forms.Select(attrs={'class': 'form-control', **attrs})


# =============================================================================
# Ordens de Serviço
# =============================================================================

class OSCreateForm(forms.Form):
    """
    Form de abertura de O.S.

    Valida dados básicos antes de passar para CriarOSService.
    """

    categoria = forms.ChoiceField(
        label='Categoria',
        choices=CategoryChoices.choices,
        widget=_select(),
        error_messages={'required': 'Categoria é obrigatória'},
    )

    setor_id = forms.ChoiceField(
        label='Setor',
        choices=[],
        widget=_select(),
        error_messages={'required': 'Setor é obrigatório'},
    )

    equipamento = forms.CharField(
        label='Equipamento / Local',
        max_length=200,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Ex: Monitor multiparamétrico leito 3',
        }),
        error_messages={
            'required': 'Equipamento é obrigatório',
            'max_length': 'Equipamento deve ter no máximo 200 caracteres',
        },
    )

    descricao = forms.CharField(
        label='Descrição do problema',
        max_length=5000,
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 5,
            'placeholder': 'Descreva o problema...',
        }),
        error_messages={
            'required': 'Descrição é obrigatória',
            'max_length': 'Descrição deve ter no máximo 5000 caracteres',
        },
    )

    urgente = forms.BooleanField(
        label='Urgente',
        required=False,
        help_text='Marque se o problema impede o atendimento',
    )

    tipo_manutencao = forms.ChoiceField(
        label='Tipo de manutenção',
        choices=MaintenanceTypeChoices.choices,
        initial=MaintenanceTypeChoices.CORRETIVA,
        widget=_select(),
    )

    setor_responsavel_id = forms.ChoiceField(
        label='Setor responsável',
        choices=[],
        required=False,
        widget=_select(),
    )

    foto = forms.ImageField(
        label='Foto',
        required=False,
        error_messages={'invalid_image': MENSAGEM_IMAGEM_INVALIDA},
        validators=[FileExtensionValidator(EXTENSOES_IMAGEM)],
        widget=forms.ClearableFileInput(attrs={'accept': 'image/*'}),
    )

    def __init__(self, *args, setores=None, setores_responsaveis=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['setor_id'].choices = _opcoes(setores, ('', 'Selecione o setor'))
        self.fields['setor_responsavel_id'].choices = _opcoes(
            setores_responsaveis, ('', 'Não definido')
        )

    def clean_equipamento(self):
        return self.cleaned_data['equipamento'].strip()

    def clean_descricao(self):
        return self.cleaned_data['descricao'].strip()

    def clean_foto(self):
        return _validar_tamanho(self.cleaned_data.get('foto'))


class OSStatusForm(forms.Form):
    status = forms.ChoiceField(
        label='Status',
        choices=StatusChoices.choices,
        widget=_select(),
    )


class OSReatribuirForm(forms.Form):
    """
    Reatribuição para setor responsável e/ou técnico.

    Ao menos um dos dois precisa ser informado.
    """

    setor_responsavel_id = forms.ChoiceField(
        label='Setor responsável',
        choices=[],
        required=False,
        widget=_select(),
    )

    tecnico_id = forms.ChoiceField(
        label='Técnico',
        choices=[],
        required=False,
        widget=_select(),
    )

    def __init__(self, *args, setores_responsaveis=None, tecnicos=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['setor_responsavel_id'].choices = _opcoes(
            setores_responsaveis, ('', 'Manter')
        )
        self.fields['tecnico_id'].choices = _opcoes(tecnicos, ('', 'Manter'))

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get('setor_responsavel_id') and not cleaned.get('tecnico_id'):
            raise forms.ValidationError('Informe o setor responsável ou o técnico')
        return cleaned


class OSPrioridadeForm(forms.Form):
    prioridade = forms.ChoiceField(
        label='Prioridade',
        choices=PriorityChoices.choices,
        widget=_select(),
    )


class ComentarioForm(forms.Form):
    comentario = forms.CharField(
        label='Comentário',
        max_length=2000,
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 3,
            'placeholder': 'Adicione uma atualização...',
        }),
        error_messages={
            'required': 'Comentário não pode ser vazio',
            'max_length': 'Comentário deve ter no máximo 2000 caracteres',
        },
    )

    def clean_comentario(self):
        comentario = self.cleaned_data['comentario'].strip()
        if not comentario:
            raise forms.ValidationError('Comentário não pode ser vazio')
        return comentario


class OSFiltroForm(forms.Form):
    """Filtro da listagem (status + busca livre)."""

    status = forms.ChoiceField(
        label='Status',
        choices=[TODOS] + list(StatusChoices.choices),
        required=False,
        widget=_select(),
    )

    busca = forms.CharField(
        label='Buscar',
        max_length=100,
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Número, equipamento ou setor...',
        }),
    )


# =============================================================================
# Cadastros
# =============================================================================

class SetorForm(forms.Form):
    nome = forms.CharField(
        label='Nome',
        max_length=100,
        widget=forms.TextInput(attrs={'class': 'form-control'}),
        error_messages={'required': 'Nome é obrigatório'},
    )

    ativo = forms.BooleanField(label='Ativo', required=False, initial=True)


class SetorResponsavelForm(SetorForm):
    descricao = forms.CharField(
        label='Descrição',
        max_length=500,
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
    )


class PerfilForm(forms.Form):
    """Edição do próprio perfil."""

    nome_completo = forms.CharField(
        label='Nome completo',
        min_length=3,
        max_length=150,
        widget=forms.TextInput(attrs={'class': 'form-control'}),
        error_messages={
            'required': 'Nome é obrigatório',
            'min_length': 'Nome deve ter pelo menos 3 caracteres',
        },
    )

    email = forms.EmailField(
        label='Email',
        widget=forms.EmailInput(attrs={'class': 'form-control'}),
    )

    telefone = forms.CharField(
        label='Telefone',
        max_length=20,
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': '(00) 00000-0000',
        }),
    )


class AvatarForm(forms.Form):
    avatar = forms.ImageField(
        label='Foto de perfil',
        required=False,
        error_messages={'invalid_image': MENSAGEM_IMAGEM_INVALIDA},
        validators=[FileExtensionValidator(EXTENSOES_IMAGEM)],
        widget=forms.ClearableFileInput(attrs={'accept': 'image/*'}),
    )

    remover = forms.BooleanField(label='Remover foto', required=False)

    def clean_avatar(self):
        return _validar_tamanho(self.cleaned_data.get('avatar'))

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get('avatar') and not cleaned.get('remover'):
            raise forms.ValidationError('Envie uma imagem ou marque remover')
        return cleaned


class AlterarPapelForm(forms.Form):
    papel = forms.ChoiceField(
        label='Papel',
        choices=RoleChoices.choices,
        widget=_select(),
    )

    setor_responsavel_id = forms.ChoiceField(
        label='Setor responsável (técnicos)',
        choices=[],
        required=False,
        widget=_select(),
    )

    def __init__(self, *args, setores_responsaveis=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['setor_responsavel_id'].choices = _opcoes(
            setores_responsaveis, ('', 'Nenhum')
        )


# =============================================================================
# Relatórios
# =============================================================================

class AnaliticoFiltroForm(forms.Form):
    """Filtros do painel de indicadores; 'all' significa sem filtro."""

    periodo_dias = forms.ChoiceField(
        label='Período',
        choices=PERIODOS_ANALISE,
        initial='30',
        required=False,
        widget=_select(),
    )

    setor_id = forms.ChoiceField(label='Setor', choices=[], required=False, widget=_select())

    tipo_manutencao = forms.ChoiceField(
        label='Tipo',
        choices=[TODOS] + list(MaintenanceTypeChoices.choices),
        required=False,
        widget=_select(),
    )

    prioridade = forms.ChoiceField(
        label='Prioridade',
        choices=[TODOS] + list(PriorityChoices.choices),
        required=False,
        widget=_select(),
    )

    status = forms.ChoiceField(
        label='Status',
        choices=[TODOS] + list(StatusChoices.choices),
        required=False,
        widget=_select(),
    )

    def __init__(self, *args, setores=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['setor_id'].choices = _opcoes(setores, TODOS)

    def clean_periodo_dias(self):
        valor = self.cleaned_data.get('periodo_dias')
        return int(valor) if valor else 30


# =============================================================================
# Autenticação
# =============================================================================

class CadastroForm(UserCreationForm):
    """Cadastro de novo usuário (entra como solicitante)."""

    nome_completo = forms.CharField(
        label='Nome completo',
        min_length=3,
        max_length=150,
        error_messages={'min_length': 'Nome deve ter pelo menos 3 caracteres'},
    )

    email = forms.EmailField(label='Email')

    class Meta(UserCreationForm.Meta):
        fields = ('username', 'email')

    def save(self, commit=True):
        user = super().save(commit=False)
        user.email = self.cleaned_data['email']
        partes = self.cleaned_data['nome_completo'].split(' ', 1)
        user.first_name = partes[0][:150]
        user.last_name = partes[1][:150] if len(partes) > 1 else ''
        if commit:
            user.save()
        return user
